from typing import Optional, Literal
from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: Literal["income", "expense"]
    parent_id: Optional[int] = None
    color: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    id: int
    vessel_id: Optional[int] = None
    name: str
    type: str
    parent_id: Optional[int] = None
    color: Optional[str] = None
    description: Optional[str] = None
    is_system: bool = False

    class Config:
        from_attributes = True


class VatProfileResponse(BaseModel):
    id: int
    name: str
    code: str
    country_code: Optional[str] = None
    percentage: float
    is_default: bool
    is_active: bool

    class Config:
        from_attributes = True
