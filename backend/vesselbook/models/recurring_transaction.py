from datetime import date
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, ForeignKey

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin, SoftDeleteMixin

FREQUENCIES = ["daily", "weekly", "monthly", "quarterly", "yearly"]


class RecurringTransaction(TimestampMixin, SoftDeleteMixin, Base):
    """Template that generates transactions on a schedule"""
    __tablename__ = "recurring_transactions"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("transaction_categories.id"), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    vat_profile_id = Column(Integer, ForeignKey("vat_profiles.id"), nullable=True)

    name = Column(String(150), nullable=False)
    description = Column(Text)
    type = Column(String(20), nullable=False)
    amount = Column(Integer, nullable=False, comment="cents")
    currency = Column(String(3), nullable=False, default="EUR")
    house_of_zeros = Column(Integer, nullable=False, default=2)

    frequency = Column(String(20), nullable=False, default="monthly")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    next_occurrence_date = Column(Date, nullable=True, index=True)
    last_generated_date = Column(Date, nullable=True)
    auto_generate = Column(Boolean, nullable=False, default=True)
    # active / paused / completed
    status = Column(String(20), nullable=False, default="active", index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    def is_due(self, today: date) -> bool:
        return (
            self.status == "active"
            and self.auto_generate
            and self.deleted_at is None
            and self.next_occurrence_date is not None
            and self.next_occurrence_date <= today
        )
