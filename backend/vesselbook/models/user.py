"""
Users and crew

A user is either an account holder (may own and manage vessels) or an
employee of a vessel, in which case it is listed as crew of vessel_id.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, ForeignKey, DECIMAL, UniqueConstraint,
)

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin, SoftDeleteMixin
from vesselbook.services.money import round_half_up


class User(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, index=True, nullable=False)
    phone = Column(String(30))

    # account / employee_of_vessel
    user_type = Column(String(30), nullable=False, default="account")

    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=True, index=True)
    position_id = Column(Integer, ForeignKey("crew_positions.id"), nullable=True)
    date_of_birth = Column(Date)
    hire_date = Column(Date)
    status = Column(String(20), nullable=False, default="active")
    login_permitted = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"

    @property
    def is_account(self) -> bool:
        return self.user_type == "account"

    @property
    def is_active(self) -> bool:
        return self.status == "active" and self.deleted_at is None


class CrewPosition(TimestampMixin, Base):
    __tablename__ = "crew_positions"
    __table_args__ = (UniqueConstraint("vessel_id", "name", name="uq_crew_position_name"),)

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)


class SalaryCompensation(TimestampMixin, Base):
    """Salary of a crew member: fixed amount or percentage of marea income"""
    __tablename__ = "salary_compensations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # fixed / percentage
    compensation_type = Column(String(20), nullable=False, default="fixed")
    fixed_amount = Column(Integer, comment="cents")
    percentage = Column(DECIMAL(5, 2))
    currency = Column(String(3))
    payment_frequency = Column(String(20), default="monthly")
    is_active = Column(Boolean, nullable=False, default=True)

    def amount_for(self, total_income: int) -> int:
        """Amount owed for a marea with the given total income"""
        if self.compensation_type == "percentage":
            if not self.percentage:
                return 0
            return round_half_up(total_income * float(self.percentage) / 100)
        return self.fixed_amount or 0
