"""Audit log API"""

from datetime import date, datetime, time
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import paginate
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import AuditLog, User
from vesselbook.schemas.audit_log import AuditLogResponse, AuditLogListResponse

router = APIRouter()


async def build_log_responses(db: AsyncSession, logs: List[AuditLog]) -> List[AuditLogResponse]:
    user_ids = {log.user_id for log in logs if log.user_id}
    names = {}
    if user_ids:
        result = await db.execute(select(User.id, User.name).where(User.id.in_(user_ids)))
        names = dict(result.all())

    responses = []
    for log in logs:
        resp = AuditLogResponse.model_validate(log)
        resp.user_name = names.get(log.user_id, "System")
        responses.append(resp)
    return responses


@router.get("/", response_model=AuditLogListResponse)
async def list_audit_logs(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("audit-logs.view")),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    action: Optional[str] = Query(None),
    model_type: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    search: Optional[str] = Query(None, description="message, model type or user name"),
) -> Any:
    conditions = [AuditLog.vessel_id == ctx.vessel_id]
    if action:
        conditions.append(AuditLog.action == action)
    if model_type:
        conditions.append(AuditLog.model_type == model_type)
    if user_id:
        conditions.append(AuditLog.user_id == user_id)
    if start_date:
        conditions.append(AuditLog.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        conditions.append(AuditLog.created_at <= datetime.combine(end_date, time.max))
    if search:
        matching_users = select(User.id).where(User.name.contains(search))
        conditions.append(or_(
            AuditLog.message.contains(search),
            AuditLog.model_type.contains(search),
            AuditLog.user_id.in_(matching_users),
        ))

    logs, total = await paginate(
        db, select(AuditLog).where(and_(*conditions)), page, limit,
        AuditLog.created_at.desc(), AuditLog.id.desc(),
    )
    return AuditLogListResponse(
        data=await build_log_responses(db, logs), total=total, page=page, limit=limit
    )


@router.get("/recent", response_model=List[AuditLogResponse])
async def recent_audit_logs(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("audit-logs.view")),
    limit: int = Query(10, ge=1, le=50),
) -> Any:
    result = await db.execute(
        select(AuditLog)
        .where(AuditLog.vessel_id == ctx.vessel_id)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
    )
    return await build_log_responses(db, list(result.scalars().all()))
