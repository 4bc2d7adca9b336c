"""
Transaction (movimentation) - a single income, expense or transfer

Amounts are integer cents:
  amount        net value
  vat_amount    VAT, income only
  total_amount  amount + vat_amount
"""

from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, DECIMAL

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin, SoftDeleteMixin

TYPE_INCOME = "income"
TYPE_EXPENSE = "expense"
TYPE_TRANSFER = "transfer"
TYPES = [TYPE_INCOME, TYPE_EXPENSE, TYPE_TRANSFER]

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUSES = [STATUS_PENDING, STATUS_COMPLETED, STATUS_CANCELLED]


class Transaction(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    transaction_number = Column(String(30), unique=True, nullable=False, index=True)
    reference = Column(String(30), index=True)

    marea_id = Column(Integer, ForeignKey("mareas.id"), nullable=True, index=True)
    maintenance_id = Column(Integer, ForeignKey("maintenances.id"), nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("transaction_categories.id"), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    crew_member_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    recurring_transaction_id = Column(Integer, ForeignKey("recurring_transactions.id"), nullable=True)

    type = Column(String(20), nullable=False, index=True)
    amount = Column(Integer, nullable=False, default=0)
    amount_per_unit = Column(Integer, nullable=True)
    quantity = Column(DECIMAL(12, 3), nullable=True)
    vat_profile_id = Column(Integer, ForeignKey("vat_profiles.id"), nullable=True)
    vat_amount = Column(Integer, nullable=False, default=0)
    total_amount = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="EUR")
    house_of_zeros = Column(Integer, nullable=False, default=2)

    transaction_date = Column(Date, nullable=False, index=True)
    transaction_month = Column(Integer, nullable=False, index=True)
    transaction_year = Column(Integer, nullable=False, index=True)

    description = Column(String(255))
    notes = Column(Text)
    status = Column(String(20), nullable=False, default=STATUS_COMPLETED, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    def __repr__(self):
        return f"<Transaction {self.transaction_number} {self.type} {self.total_amount}>"

    @property
    def type_display(self) -> str:
        return {
            TYPE_INCOME: "Income",
            TYPE_EXPENSE: "Expense",
            TYPE_TRANSFER: "Transfer",
        }.get(self.type, self.type)

    @property
    def signed_total(self) -> int:
        """Positive for income, negative for expense, zero for transfers"""
        if self.type == TYPE_INCOME:
            return self.total_amount
        if self.type == TYPE_EXPENSE:
            return -self.total_amount
        return 0
