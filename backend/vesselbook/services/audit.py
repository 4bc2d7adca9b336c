"""
Audit trail

Every create / update / delete goes through one of the log_* helpers.
The helpers only add the row to the session; the caller commits it
together with the change being audited.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.models import AuditLog

IDENTIFIER_FIELDS = [
    "name",
    "transaction_number",
    "marea_number",
    "maintenance_number",
    "registration_number",
    "email",
    "company_name",
]

IGNORED_FIELDS = {"id", "created_at", "updated_at", "deleted_at"}


def model_name(obj: Any) -> str:
    return type(obj).__name__


def identifier(obj: Any) -> str:
    for attr in IDENTIFIER_FIELDS:
        value = getattr(obj, attr, None)
        if value:
            return str(value)
    return str(getattr(obj, "id", ""))


def field_label(field_name: str) -> str:
    """transaction_date -> Transaction Date"""
    name = field_name[:-3] if field_name.endswith("_id") else field_name
    return " ".join(part.capitalize() for part in name.split("_"))


def format_value(value: Any) -> str:
    if value is None or value == "":
        return "(empty)"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _json_safe(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def snapshot(obj: Any) -> Dict[str, Any]:
    """Column values of a model instance"""
    mapper = inspect(obj).mapper
    return {col.key: getattr(obj, col.key) for col in mapper.column_attrs}


def changed_fields(before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    changes = {}
    for key, new in after.items():
        if key in IGNORED_FIELDS:
            continue
        old = before.get(key)
        if old != new:
            changes[key] = {"old": _json_safe(old), "new": _json_safe(new)}
    return changes


def _actor(ctx) -> str:
    user = getattr(ctx, "user", None)
    return user.name if user is not None else "System"


def _record(db: AsyncSession, ctx, action: str, obj: Any, message: str,
            changes: Optional[Dict[str, Any]] = None) -> AuditLog:
    log = AuditLog(
        user_id=ctx.user.id if ctx is not None else None,
        vessel_id=ctx.vessel_id if ctx is not None else getattr(obj, "vessel_id", None),
        model_type=model_name(obj),
        model_id=getattr(obj, "id", None),
        action=action,
        message=message,
        changes=changes or None,
        ip_address=getattr(ctx, "ip_address", None),
        user_agent=getattr(ctx, "user_agent", None),
    )
    db.add(log)
    return log


def log_create(db: AsyncSession, ctx, obj: Any) -> AuditLog:
    message = f"{_actor(ctx)} created {model_name(obj)} '{identifier(obj)}'"
    return _record(db, ctx, "create", obj, message)


def log_update(db: AsyncSession, ctx, obj: Any, before: Dict[str, Any]) -> Optional[AuditLog]:
    """Log the difference between `before` (a snapshot) and the object now; None if nothing changed"""
    changes = changed_fields(before, snapshot(obj))
    if not changes:
        return None
    parts = [
        f"{field_label(key)} from '{format_value(change['old'])}' to '{format_value(change['new'])}'"
        for key, change in changes.items()
    ]
    message = f"{_actor(ctx)} changed {', '.join(parts)} in {model_name(obj)} '{identifier(obj)}'"
    return _record(db, ctx, "update", obj, message, changes)


def log_delete(db: AsyncSession, ctx, obj: Any) -> AuditLog:
    message = f"{_actor(ctx)} deleted {model_name(obj)} '{identifier(obj)}'"
    return _record(db, ctx, "delete", obj, message)


def log_restore(db: AsyncSession, ctx, obj: Any) -> AuditLog:
    message = f"{_actor(ctx)} restored {model_name(obj)} '{identifier(obj)}'"
    return _record(db, ctx, "restore", obj, message)


def log_force_delete(db: AsyncSession, ctx, obj: Any) -> AuditLog:
    message = f"{_actor(ctx)} permanently deleted {model_name(obj)} '{identifier(obj)}'"
    return _record(db, ctx, "force_delete", obj, message)


def log_action(db: AsyncSession, ctx, obj: Any, action: str, message: str) -> AuditLog:
    """Free-form entry, e.g. status changes"""
    return _record(db, ctx, action, obj, f"{_actor(ctx)} {message}")
