"""Vessel dashboard"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.api_v1.endpoints.mareas.core import build_marea_responses
from vesselbook.api.api_v1.endpoints.transactions import build_transaction_responses
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.schemas.report import DashboardResponse
from vesselbook.services import reports, vessel_settings

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("vessels.view")),
) -> Any:
    data = await reports.dashboard(db, ctx.vessel_id)
    active = data.pop("active_marea")
    data["active_marea"] = (await build_marea_responses(db, [active]))[0] if active else None
    data["preparing_mareas"] = await build_marea_responses(db, data["preparing_mareas"])
    data["recent_transactions"] = await build_transaction_responses(db, data["recent_transactions"])
    data["currency"] = await vessel_settings.default_currency(db, ctx.vessel_id)
    return data
