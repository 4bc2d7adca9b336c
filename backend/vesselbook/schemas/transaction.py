"""Transaction (movimentation) schemas; amounts in cents"""
from typing import Optional, List, Literal
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator, model_validator

TransactionType = Literal["income", "expense", "transfer"]
TransactionStatus = Literal["pending", "completed", "cancelled"]


class TransactionCreate(BaseModel):
    type: TransactionType
    category_id: int
    amount: Optional[int] = Field(None, ge=0, description="cents; gross when amount_includes_vat")
    amount_per_unit: Optional[int] = Field(None, ge=0, description="cents")
    quantity: Optional[Decimal] = Field(None, gt=0)
    amount_includes_vat: bool = False
    vat_profile_id: Optional[int] = None
    transaction_date: date
    supplier_id: Optional[int] = None
    crew_member_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    marea_id: Optional[int] = None
    maintenance_id: Optional[int] = None
    description: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    status: TransactionStatus = "completed"
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    house_of_zeros: Optional[int] = Field(None, ge=0, le=4)

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_amount(self):
        if self.amount is None and (self.amount_per_unit is None or self.quantity is None):
            raise ValueError("amount, or amount_per_unit and quantity, is required")
        return self


class TransactionUpdate(BaseModel):
    type: Optional[TransactionType] = None
    category_id: Optional[int] = None
    amount: Optional[int] = Field(None, ge=0)
    amount_per_unit: Optional[int] = Field(None, ge=0)
    quantity: Optional[Decimal] = Field(None, gt=0)
    amount_includes_vat: bool = False
    vat_profile_id: Optional[int] = None
    transaction_date: Optional[date] = None
    supplier_id: Optional[int] = None
    crew_member_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    description: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    status: Optional[TransactionStatus] = None


class TransactionResponse(BaseModel):
    id: int
    vessel_id: int
    transaction_number: str
    reference: Optional[str] = None
    type: str
    type_display: str = ""
    status: str
    category_id: int
    category_name: Optional[str] = None
    supplier_id: Optional[int] = None
    crew_member_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    marea_id: Optional[int] = None
    maintenance_id: Optional[int] = None
    recurring_transaction_id: Optional[int] = None
    amount: int
    amount_per_unit: Optional[int] = None
    quantity: Optional[float] = None
    vat_profile_id: Optional[int] = None
    vat_amount: int
    total_amount: int
    formatted_total: str = ""
    currency: str
    house_of_zeros: int
    transaction_date: date
    transaction_month: int
    transaction_year: int
    description: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    data: List[TransactionResponse]
    total: int
    page: int
    limit: int
    total_income: int = 0
    total_expenses: int = 0


class TransactionHistoryItem(BaseModel):
    year: int
    month: int
    count: int
    total_income: int
    total_expenses: int
    net: int
