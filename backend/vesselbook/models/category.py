"""
Transaction categories

Rows with vessel_id NULL are global and shared by every vessel.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin


class TransactionCategory(TimestampMixin, Base):
    __tablename__ = "transaction_categories"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    # income / expense
    type = Column(String(20), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("transaction_categories.id"), nullable=True)
    color = Column(String(20))
    description = Column(Text)
    is_system = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<TransactionCategory {self.type}: {self.name}>"
