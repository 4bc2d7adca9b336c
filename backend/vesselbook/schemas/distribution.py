"""Distribution profile and item schemas"""
from typing import Optional, List, Literal
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field

ValueType = Literal[
    "base_total_income",
    "base_total_expense",
    "fixed_amount",
    "percentage_of_income",
    "percentage_of_expense",
    "reference_item",
]
Operation = Literal["set", "add", "subtract", "multiply", "divide"]


class DistributionItemIn(BaseModel):
    """References point to other items of the same submission by order_index"""
    order_index: int = Field(..., ge=0)
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    value_type: ValueType
    value_amount: Optional[Decimal] = None
    operation: Operation = "set"
    reference_item_order_index: Optional[int] = None
    reference_operation_item_order_index: Optional[int] = None


class MareaDistributionItemIn(DistributionItemIn):
    profile_item_id: Optional[int] = None


class DistributionItemResponse(BaseModel):
    id: int
    order_index: int
    name: str
    description: Optional[str] = None
    value_type: str
    value_amount: Optional[float] = None
    operation: str
    reference_item_id: Optional[int] = None
    reference_operation_item_id: Optional[int] = None

    class Config:
        from_attributes = True


class ProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    is_default: bool = False
    items: List[DistributionItemIn] = []


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    is_default: Optional[bool] = None
    items: Optional[List[DistributionItemIn]] = None


class ProfileResponse(BaseModel):
    id: int
    vessel_id: int
    name: str
    description: Optional[str] = None
    is_default: bool
    is_system: bool
    items: List[DistributionItemResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class PreviewRequest(BaseModel):
    total_income: int = Field(0, ge=0)
    total_expenses: int = Field(0, ge=0)
    currency: Optional[str] = None
    house_of_zeros: int = 2
    items: List[DistributionItemIn]


class DistributionRow(BaseModel):
    id: int
    order_index: int
    name: str
    value_type: str
    operation: str
    value: int
    formatted_value: str


class DistributionResult(BaseModel):
    total_income: int
    total_expenses: int
    net_result: int
    final_result: int
    formatted_final_result: str
    items: List[DistributionRow] = []
    uses_overrides: bool = False
