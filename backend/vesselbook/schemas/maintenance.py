from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, Field

from vesselbook.schemas.transaction import TransactionResponse


class MaintenanceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    start_date: date
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    house_of_zeros: Optional[int] = Field(None, ge=0, le=4)
    transaction_ids: List[int] = []


class MaintenanceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    start_date: Optional[date] = None
    transaction_ids: Optional[List[int]] = None


class MaintenanceFinalize(BaseModel):
    end_date: date


class MaintenanceResponse(BaseModel):
    id: int
    vessel_id: int
    maintenance_number: str
    name: str
    description: Optional[str] = None
    status: str
    start_date: date
    end_date: Optional[date] = None
    closed_at: Optional[datetime] = None
    currency: Optional[str] = None
    house_of_zeros: int
    total_income: int = 0
    total_expenses: int = 0
    net_result: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class MaintenanceDetailResponse(MaintenanceResponse):
    transactions: List[TransactionResponse] = []


class MaintenanceListResponse(BaseModel):
    data: List[MaintenanceResponse]
    total: int
    page: int
    limit: int
