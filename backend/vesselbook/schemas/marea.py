"""Marea schemas"""
from typing import Optional, List, Literal
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, model_validator

from vesselbook.schemas.distribution import DistributionResult
from vesselbook.schemas.transaction import TransactionResponse

MareaStatus = Literal["preparing", "at_sea", "returned", "closed", "cancelled"]


class MareaCreate(BaseModel):
    marea_number: Optional[str] = Field(None, max_length=30, description="auto when empty")
    name: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = None
    estimated_departure_date: Optional[date] = None
    estimated_return_date: Optional[date] = None
    distribution_profile_id: Optional[int] = None
    use_calculation: bool = False
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    house_of_zeros: Optional[int] = Field(None, ge=0, le=4)

    @model_validator(mode="after")
    def check_dates(self):
        if (self.estimated_departure_date and self.estimated_return_date
                and self.estimated_return_date < self.estimated_departure_date):
            raise ValueError("estimated_return_date must be on or after estimated_departure_date")
        return self


class MareaUpdate(BaseModel):
    marea_number: Optional[str] = Field(None, min_length=1, max_length=30)
    name: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = None
    estimated_departure_date: Optional[date] = None
    estimated_return_date: Optional[date] = None
    actual_departure_date: Optional[date] = None
    actual_return_date: Optional[date] = None
    distribution_profile_id: Optional[int] = None
    use_calculation: Optional[bool] = None

    @model_validator(mode="after")
    def check_dates(self):
        if (self.estimated_departure_date and self.estimated_return_date
                and self.estimated_return_date < self.estimated_departure_date):
            raise ValueError("estimated_return_date must be on or after estimated_departure_date")
        return self


class NextMareaNumber(BaseModel):
    marea_number: str


class MareaStatusChange(BaseModel):
    effective_date: Optional[date] = None


class MareaResponse(BaseModel):
    id: int
    vessel_id: int
    marea_number: str
    name: Optional[str] = None
    description: Optional[str] = None
    status: str
    status_display: str = ""
    estimated_departure_date: Optional[date] = None
    estimated_return_date: Optional[date] = None
    actual_departure_date: Optional[date] = None
    actual_return_date: Optional[date] = None
    closed_at: Optional[datetime] = None
    distribution_profile_id: Optional[int] = None
    use_calculation: bool
    currency: Optional[str] = None
    house_of_zeros: int
    total_income: int = 0
    total_expenses: int = 0
    net_result: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class MareaListResponse(BaseModel):
    data: List[MareaResponse]
    total: int
    page: int
    limit: int


class MareaCrewIn(BaseModel):
    user_id: int
    notes: Optional[str] = None


class MareaCrewResponse(BaseModel):
    id: int
    user_id: int
    name: str
    position_name: Optional[str] = None
    notes: Optional[str] = None


class QuantityReturnIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    quantity: Decimal = Field(..., gt=0)
    notes: Optional[str] = None


class QuantityReturnResponse(BaseModel):
    id: int
    marea_id: int
    name: str
    quantity: float
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class AttachTransaction(BaseModel):
    transaction_id: int


class MareaDetailResponse(MareaResponse):
    crew: List[MareaCrewResponse] = []
    quantity_returns: List[QuantityReturnResponse] = []
    transactions: List[TransactionResponse] = []
    distribution: Optional[DistributionResult] = None


class SalaryDataResponse(BaseModel):
    user_id: int
    name: str
    compensation_type: Optional[str] = None
    fixed_amount: Optional[int] = None
    percentage: Optional[float] = None
    total_income: int
    amount: int
    formatted_amount: str
    currency: Optional[str] = None


class SalaryPaymentIn(BaseModel):
    user_id: int
    amount: Optional[int] = Field(None, ge=0, description="cents; computed when empty")
    transaction_date: Optional[date] = None
    bank_account_id: Optional[int] = None
    notes: Optional[str] = None
