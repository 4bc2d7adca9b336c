"""
Audit log - who changed what, per vessel
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON

from vesselbook.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=True, index=True)

    # Model class name, e.g. "Marea"
    model_type = Column(String(50), nullable=False, index=True)
    model_id = Column(Integer, index=True)

    # create / update / delete / restore / force_delete
    action = Column(String(20), nullable=False, index=True)
    message = Column(Text, nullable=False)
    # {field: {"old": ..., "new": ...}}
    changes = Column(JSON)

    ip_address = Column(String(50))
    user_agent = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.model_type}:{self.model_id}>"

    @property
    def action_display(self) -> str:
        action_map = {
            "create": "Created",
            "update": "Updated",
            "delete": "Deleted",
            "restore": "Restored",
            "force_delete": "Permanently deleted",
        }
        return action_map.get(self.action, self.action)
