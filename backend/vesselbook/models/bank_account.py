from sqlalchemy import Column, Integer, String, Text, ForeignKey

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin


class BankAccount(TimestampMixin, Base):
    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    bank_name = Column(String(100))
    account_number = Column(String(50))
    iban = Column(String(50))
    initial_balance = Column(Integer, nullable=False, default=0, comment="cents")
    current_balance = Column(Integer, nullable=False, default=0, comment="cents")
    # active / inactive
    status = Column(String(20), nullable=False, default="active")
    notes = Column(Text)
