"""Vessel, settings and member schemas"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field, EmailStr, field_validator

VesselStatus = Literal["active", "maintenance", "suspended"]
RoleName = Literal["administrator", "supervisor", "moderator", "normal"]


class VesselBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    registration_number: str = Field(..., min_length=1, max_length=50)
    vessel_type: Optional[str] = Field(None, max_length=50)
    capacity: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    status: VesselStatus = "active"
    country_code: Optional[str] = Field(None, min_length=2, max_length=2)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    notes: Optional[str] = None

    @field_validator("country_code", "currency_code", mode="before")
    @classmethod
    def upper(cls, v):
        return v.upper() if isinstance(v, str) else v


class VesselCreate(VesselBase):
    pass


class VesselUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    registration_number: Optional[str] = Field(None, min_length=1, max_length=50)
    vessel_type: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    status: Optional[VesselStatus] = None
    country_code: Optional[str] = Field(None, min_length=2, max_length=2)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    notes: Optional[str] = None

    @field_validator("country_code", "currency_code", mode="before")
    @classmethod
    def upper(cls, v):
        return v.upper() if isinstance(v, str) else v


class VesselResponse(VesselBase):
    id: int
    owner_id: Optional[int] = None
    status_display: str = ""
    role: Optional[str] = None
    permissions: List[str] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VesselListResponse(BaseModel):
    data: List[VesselResponse]
    total: int


class VesselSettingResponse(BaseModel):
    vessel_id: int
    country_code: Optional[str] = None
    currency_code: Optional[str] = None
    vat_profile_id: Optional[int] = None
    starting_marea_number: int = 1

    class Config:
        from_attributes = True


class VesselSettingUpdate(BaseModel):
    country_code: Optional[str] = Field(None, min_length=2, max_length=2)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    vat_profile_id: Optional[int] = None
    starting_marea_number: Optional[int] = Field(None, ge=1)

    @field_validator("country_code", "currency_code", mode="before")
    @classmethod
    def upper(cls, v):
        return v.upper() if isinstance(v, str) else v


class MemberAssign(BaseModel):
    """Give a user (by id or e-mail) a role on the vessel"""
    user_id: Optional[int] = None
    email: Optional[EmailStr] = None
    role: RoleName = "normal"


class MemberResponse(BaseModel):
    user_id: int
    name: str
    email: str
    role: str
    role_name: str
    is_owner: bool = False
