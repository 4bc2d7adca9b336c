"""Crew member and crew position schemas"""
from typing import Optional, List, Literal
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, EmailStr, model_validator


class CrewPositionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CrewPositionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class CrewPositionResponse(BaseModel):
    id: int
    vessel_id: int
    name: str
    description: Optional[str] = None
    crew_count: int = 0

    class Config:
        from_attributes = True


class SalaryCompensationIn(BaseModel):
    compensation_type: Literal["fixed", "percentage"] = "fixed"
    fixed_amount: Optional[int] = Field(None, ge=0, description="cents")
    percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    payment_frequency: Literal["monthly", "per_marea", "weekly", "yearly"] = "monthly"
    is_active: bool = True

    @model_validator(mode="after")
    def check_amount(self):
        if self.compensation_type == "fixed" and self.fixed_amount is None:
            raise ValueError("fixed_amount is required for fixed compensation")
        if self.compensation_type == "percentage" and self.percentage is None:
            raise ValueError("percentage is required for percentage compensation")
        return self


class SalaryCompensationResponse(BaseModel):
    id: int
    compensation_type: str
    fixed_amount: Optional[int] = None
    percentage: Optional[float] = None
    currency: Optional[str] = None
    payment_frequency: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class CrewMemberBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=30)
    position_id: Optional[int] = None
    date_of_birth: Optional[date] = None
    hire_date: Optional[date] = None
    status: Literal["active", "inactive"] = "active"
    login_permitted: bool = False
    notes: Optional[str] = None


class CrewMemberCreate(CrewMemberBase):
    salary: Optional[SalaryCompensationIn] = None


class CrewMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    position_id: Optional[int] = None
    date_of_birth: Optional[date] = None
    hire_date: Optional[date] = None
    status: Optional[Literal["active", "inactive"]] = None
    login_permitted: Optional[bool] = None
    notes: Optional[str] = None


class CrewMemberResponse(CrewMemberBase):
    id: int
    vessel_id: Optional[int] = None
    user_type: str
    position_name: Optional[str] = None
    salary: Optional[SalaryCompensationResponse] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CrewMemberListResponse(BaseModel):
    data: List[CrewMemberResponse]
    total: int
    page: int
    limit: int
