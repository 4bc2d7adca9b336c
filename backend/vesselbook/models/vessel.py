"""
Vessel - the tenant every business row belongs to
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin


class Vessel(TimestampMixin, Base):
    __tablename__ = "vessels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    registration_number = Column(String(50), unique=True, nullable=False, index=True)
    vessel_type = Column(String(50))
    capacity = Column(Integer)
    year_built = Column(Integer)

    # active / maintenance / suspended
    status = Column(String(20), nullable=False, default="active")

    country_code = Column(String(2))
    currency_code = Column(String(3))
    owner_id = Column(Integer, ForeignKey("users.id", use_alter=True), nullable=True)
    notes = Column(Text)

    def __repr__(self):
        return f"<Vessel {self.registration_number}: {self.name}>"

    @property
    def status_display(self) -> str:
        status_map = {
            "active": "Active",
            "maintenance": "In maintenance",
            "suspended": "Suspended",
        }
        return status_map.get(self.status, self.status)


class VesselSetting(TimestampMixin, Base):
    """Per-vessel defaults, created lazily on first read"""
    __tablename__ = "vessel_settings"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), unique=True, nullable=False)
    country_code = Column(String(2))
    currency_code = Column(String(3))
    vat_profile_id = Column(Integer, ForeignKey("vat_profiles.id"), nullable=True)
    starting_marea_number = Column(Integer, nullable=False, default=1)

    def __repr__(self):
        return f"<VesselSetting vessel={self.vessel_id}>"
