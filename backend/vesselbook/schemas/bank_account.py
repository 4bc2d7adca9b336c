from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, Field


class BankAccountBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    bank_name: Optional[str] = Field(None, max_length=100)
    account_number: Optional[str] = Field(None, max_length=50)
    iban: Optional[str] = Field(None, max_length=50)
    status: Literal["active", "inactive"] = "active"
    notes: Optional[str] = None


class BankAccountCreate(BankAccountBase):
    initial_balance: int = Field(0, description="cents")


class BankAccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    iban: Optional[str] = None
    status: Optional[Literal["active", "inactive"]] = None
    notes: Optional[str] = None
    current_balance: Optional[int] = None


class BankAccountResponse(BankAccountBase):
    id: int
    vessel_id: int
    initial_balance: int
    current_balance: int
    formatted_balance: str = ""
    created_at: datetime

    class Config:
        from_attributes = True
