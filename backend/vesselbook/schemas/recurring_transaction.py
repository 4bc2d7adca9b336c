from typing import Optional, List, Literal
from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator

Frequency = Literal["daily", "weekly", "monthly", "quarterly", "yearly"]


class RecurringTransactionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    type: Literal["income", "expense"]
    category_id: int
    supplier_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    vat_profile_id: Optional[int] = None
    amount: int = Field(..., ge=0, description="cents")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    frequency: Frequency = "monthly"
    start_date: date
    end_date: Optional[date] = None
    auto_generate: bool = True

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class RecurringTransactionCreate(RecurringTransactionBase):
    pass


class RecurringTransactionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    vat_profile_id: Optional[int] = None
    amount: Optional[int] = Field(None, ge=0)
    frequency: Optional[Frequency] = None
    end_date: Optional[date] = None
    next_occurrence_date: Optional[date] = None
    auto_generate: Optional[bool] = None
    status: Optional[Literal["active", "paused", "completed"]] = None


class RecurringTransactionResponse(RecurringTransactionBase):
    id: int
    vessel_id: int
    currency: str
    house_of_zeros: int
    next_occurrence_date: Optional[date] = None
    last_generated_date: Optional[date] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class RecurringTransactionListResponse(BaseModel):
    data: List[RecurringTransactionResponse]
    total: int
    page: int
    limit: int


class GenerateResponse(BaseModel):
    generated: int
