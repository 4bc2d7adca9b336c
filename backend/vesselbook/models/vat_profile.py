from sqlalchemy import Column, Integer, String, Boolean, DECIMAL

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin


class VatProfile(TimestampMixin, Base):
    __tablename__ = "vat_profiles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    code = Column(String(20), nullable=False)
    country_code = Column(String(2))
    percentage = Column(DECIMAL(5, 2), nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<VatProfile {self.code}: {self.percentage}%>"
