from sqlalchemy import Column, Integer, String, Text, ForeignKey

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin, SoftDeleteMixin


class Supplier(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    company_name = Column(String(150), nullable=False, index=True)
    description = Column(Text)
    email = Column(String(150))
    phone = Column(String(30))
    address = Column(String(255))
    notes = Column(Text)

    def __repr__(self):
        return f"<Supplier {self.id}: {self.company_name}>"
