"""
Marea - one fishing trip

Lifecycle:
    preparing -> at_sea -> returned -> closed
    any state except closed -> cancelled
"""

from datetime import date, datetime
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, DECIMAL, UniqueConstraint,
)

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin, SoftDeleteMixin

STATUS_PREPARING = "preparing"
STATUS_AT_SEA = "at_sea"
STATUS_RETURNED = "returned"
STATUS_CLOSED = "closed"
STATUS_CANCELLED = "cancelled"

ACTIVE_STATUSES = [STATUS_PREPARING, STATUS_AT_SEA, STATUS_RETURNED]


class MareaStateError(ValueError):
    pass


class Marea(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "mareas"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    marea_number = Column(String(30), nullable=False, index=True)
    name = Column(String(150))
    description = Column(Text)
    status = Column(String(20), nullable=False, default=STATUS_PREPARING, index=True)

    estimated_departure_date = Column(Date)
    estimated_return_date = Column(Date)
    actual_departure_date = Column(Date)
    actual_return_date = Column(Date)
    closed_at = Column(DateTime)

    distribution_profile_id = Column(Integer, ForeignKey("marea_distribution_profiles.id"), nullable=True)
    use_calculation = Column(Boolean, nullable=False, default=False)
    currency = Column(String(3))
    house_of_zeros = Column(Integer, nullable=False, default=2)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    def __repr__(self):
        return f"<Marea {self.marea_number}: {self.status}>"

    @property
    def status_display(self) -> str:
        return {
            STATUS_PREPARING: "Preparing",
            STATUS_AT_SEA: "At sea",
            STATUS_RETURNED: "Returned",
            STATUS_CLOSED: "Closed",
            STATUS_CANCELLED: "Cancelled",
        }.get(self.status, self.status)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_locked(self) -> bool:
        """Closed and cancelled mareas no longer accept transactions"""
        return self.status in (STATUS_CLOSED, STATUS_CANCELLED)

    def period(self):
        """(start, end) of the trip, falling back to estimates"""
        start = self.actual_departure_date or self.estimated_departure_date
        end = self.actual_return_date or self.estimated_return_date
        return start, end

    def mark_at_sea(self, when: date = None):
        if self.status != STATUS_PREPARING:
            raise MareaStateError("Only mareas in preparation can go to sea")
        self.status = STATUS_AT_SEA
        self.actual_departure_date = when or date.today()

    def mark_returned(self, when: date = None):
        if self.status != STATUS_AT_SEA:
            raise MareaStateError("Only mareas at sea can be marked as returned")
        self.status = STATUS_RETURNED
        self.actual_return_date = when or date.today()

    def close(self):
        if self.status in (STATUS_CLOSED, STATUS_CANCELLED):
            raise MareaStateError("Marea is already closed or cancelled")
        self.status = STATUS_CLOSED
        self.closed_at = datetime.utcnow()

    def cancel(self):
        if self.status in (STATUS_CLOSED, STATUS_CANCELLED):
            raise MareaStateError("Closed or cancelled mareas cannot be cancelled")
        self.status = STATUS_CANCELLED


class MareaCrew(TimestampMixin, Base):
    __tablename__ = "marea_crew"
    __table_args__ = (UniqueConstraint("marea_id", "user_id", name="uq_marea_crew_member"),)

    id = Column(Integer, primary_key=True, index=True)
    marea_id = Column(Integer, ForeignKey("mareas.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    notes = Column(Text)


class MareaQuantityReturn(TimestampMixin, Base):
    """Catch landed at the end of a marea"""
    __tablename__ = "marea_quantity_returns"

    id = Column(Integer, primary_key=True, index=True)
    marea_id = Column(Integer, ForeignKey("mareas.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    quantity = Column(DECIMAL(12, 3), nullable=False)
    notes = Column(Text)
