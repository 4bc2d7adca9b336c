"""Shared model columns"""

from datetime import datetime
from sqlalchemy import Column, DateTime


class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SoftDeleteMixin:
    """Rows are hidden by setting deleted_at and come back through the recycle bin"""

    deleted_at = Column(DateTime, nullable=True, index=True)

    @classmethod
    def not_trashed(cls):
        return cls.deleted_at.is_(None)

    @classmethod
    def only_trashed(cls):
        return cls.deleted_at.is_not(None)

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, when: datetime = None):
        self.deleted_at = when or datetime.utcnow()

    def restore(self):
        self.deleted_at = None
