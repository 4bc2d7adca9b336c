"""
Marea distribution rules

A profile is an ordered list of items. Each item produces a value
(value_type) and combines it with an earlier result (operation).
Mareas may carry their own copy of the items to override the profile.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, DECIMAL

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin, SoftDeleteMixin

VALUE_TYPES = [
    "base_total_income",
    "base_total_expense",
    "fixed_amount",
    "percentage_of_income",
    "percentage_of_expense",
    "reference_item",
]

OPERATIONS = ["set", "add", "subtract", "multiply", "divide"]


class DistributionRuleMixin:
    order_index = Column(Integer, nullable=False, default=0)
    name = Column(String(150), nullable=False)
    description = Column(Text)
    value_type = Column(String(30), nullable=False)
    # Percent for percentage_* types, major units for fixed_amount
    value_amount = Column(DECIMAL(14, 4))
    reference_item_id = Column(Integer, nullable=True)
    operation = Column(String(20), nullable=False, default="set")
    reference_operation_item_id = Column(Integer, nullable=True)


class MareaDistributionProfile(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "marea_distribution_profiles"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text)
    is_default = Column(Boolean, nullable=False, default=False)
    is_system = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    def __repr__(self):
        return f"<MareaDistributionProfile {self.id}: {self.name}>"


class MareaDistributionProfileItem(DistributionRuleMixin, TimestampMixin, Base):
    __tablename__ = "marea_distribution_profile_items"

    id = Column(Integer, primary_key=True, index=True)
    distribution_profile_id = Column(
        Integer, ForeignKey("marea_distribution_profiles.id"), nullable=False, index=True
    )


class MareaDistributionItem(DistributionRuleMixin, TimestampMixin, Base):
    """Per-marea override of a profile item"""
    __tablename__ = "marea_distribution_items"

    id = Column(Integer, primary_key=True, index=True)
    marea_id = Column(Integer, ForeignKey("mareas.id"), nullable=False, index=True)
    profile_item_id = Column(Integer, ForeignKey("marea_distribution_profile_items.id"), nullable=True)
