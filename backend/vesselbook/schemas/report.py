"""Report and dashboard schemas; amounts in cents"""
from typing import Optional, List
from datetime import date
from pydantic import BaseModel

from vesselbook.schemas.marea import MareaResponse
from vesselbook.schemas.transaction import TransactionResponse


class MonthSummary(BaseModel):
    year: int
    month: int
    month_label: str
    count: int
    total_income: int
    total_expenses: int
    net_balance: int


class FinancialSummary(BaseModel):
    total_income: int
    total_expenses: int
    net_balance: int
    transaction_count: int
    income_change: float
    expenses_change: float
    net_change: float


class CategoryRow(BaseModel):
    category_id: Optional[int] = None
    category_name: str
    category_type: Optional[str] = None
    category_color: Optional[str] = None
    income: int
    expenses: int
    count: int


class DayRow(BaseModel):
    date: date
    income: int
    expenses: int
    net: int
    count: int


class QuantityRow(BaseModel):
    name: str
    quantity: float


class MareaMonthRow(BaseModel):
    id: int
    marea_number: str
    name: Optional[str] = None
    status: str
    actual_departure_date: Optional[date] = None
    actual_return_date: Optional[date] = None
    estimated_departure_date: Optional[date] = None
    estimated_return_date: Optional[date] = None
    total_income: int
    total_expenses: int
    net_result: int
    transaction_count: int
    quantity_returns: List[QuantityRow] = []


class FinancialReport(BaseModel):
    year: int
    month: int
    month_label: str
    currency: str
    summary: FinancialSummary
    category_breakdown: List[CategoryRow]
    daily_breakdown: List[DayRow]
    mareas: List[MareaMonthRow]


class VatMonth(BaseModel):
    year: int
    month: int
    month_label: str
    count: int
    total_vat: int


class VatTotals(BaseModel):
    base_amount: int
    vat_amount: int
    total_amount: int
    count: int


class VatSummary(VatTotals):
    vat_change: float
    base_change: float


class VatTransactionRow(BaseModel):
    id: int
    transaction_number: str
    transaction_date: date
    description: Optional[str] = None
    amount: int
    vat_amount: int
    total_amount: int


class VatProfileRow(VatTotals):
    vat_profile_id: Optional[int] = None
    name: str
    percentage: float
    transactions: List[VatTransactionRow] = []


class VatCategoryRow(VatTotals):
    category_id: Optional[int] = None
    name: str


class VatDayRow(VatTotals):
    date: date


class VatMareaRow(VatTotals):
    marea_id: int
    marea_number: Optional[str] = None
    name: Optional[str] = None


class VatReport(BaseModel):
    year: int
    month: int
    month_label: str
    currency: str
    summary: VatSummary
    by_vat_profile: List[VatProfileRow]
    by_category: List[VatCategoryRow]
    by_day: List[VatDayRow]
    by_marea: List[VatMareaRow]


class CurrentMonth(BaseModel):
    year: int
    month: int
    total_income: int
    total_expenses: int
    net_balance: int


class SeriesRow(BaseModel):
    year: int
    month: int
    month_label: str
    income: int
    expenses: int
    net: int


class DashboardResponse(BaseModel):
    currency: str
    current_month: CurrentMonth
    last_six_months: List[SeriesRow]
    is_at_sea: bool
    active_marea: Optional[MareaResponse] = None
    preparing_mareas: List[MareaResponse] = []
    recent_transactions: List[TransactionResponse] = []
    open_maintenances: int = 0
