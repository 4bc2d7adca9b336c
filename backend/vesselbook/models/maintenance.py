"""
Maintenance record - groups the transactions of one repair or docking job
"""

from datetime import date, datetime
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin, SoftDeleteMixin

STATUS_OPEN = "open"
STATUS_CLOSED = "closed"
STATUS_CANCELLED = "cancelled"


class MaintenanceStateError(ValueError):
    pass


class Maintenance(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "maintenances"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    maintenance_number = Column(String(30), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=STATUS_OPEN, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    closed_at = Column(DateTime, nullable=True)
    currency = Column(String(3))
    house_of_zeros = Column(Integer, nullable=False, default=2)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    def __repr__(self):
        return f"<Maintenance {self.maintenance_number}: {self.status}>"

    @property
    def is_open(self) -> bool:
        return self.status == STATUS_OPEN

    def finalize(self, end_date: date):
        if self.status != STATUS_OPEN:
            raise MaintenanceStateError("Only open maintenances can be finalized")
        if end_date < self.start_date:
            raise MaintenanceStateError("End date must be on or after the start date")
        self.end_date = end_date
        self.status = STATUS_CLOSED
        self.closed_at = datetime.utcnow()

    def cancel(self):
        if self.status != STATUS_OPEN:
            raise MaintenanceStateError("Only open maintenances can be cancelled")
        self.status = STATUS_CANCELLED
