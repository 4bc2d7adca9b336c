"""Vessel roles and user assignments"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from vesselbook.db.base import Base
from vesselbook.models.mixins import TimestampMixin


class VesselRoleAccess(TimestampMixin, Base):
    __tablename__ = "vessel_role_accesses"

    id = Column(Integer, primary_key=True, index=True)
    # administrator / supervisor / moderator / normal
    name = Column(String(50), unique=True, nullable=False)
    # Key into the permissions table
    display_name = Column(String(50), nullable=False)
    description = Column(Text)
    permissions = Column(JSON, default=list)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<VesselRoleAccess {self.name}>"


class VesselUserRole(TimestampMixin, Base):
    __tablename__ = "vessel_user_roles"
    __table_args__ = (UniqueConstraint("user_id", "vessel_id", name="uq_vessel_user_role"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False, index=True)
    vessel_role_access_id = Column(Integer, ForeignKey("vessel_role_accesses.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    role_access = relationship("VesselRoleAccess", lazy="joined")

    @property
    def role_name(self) -> str:
        return self.role_access.display_name if self.role_access else "default"
