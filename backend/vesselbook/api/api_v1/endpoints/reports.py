"""Financial and VAT reports"""

from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.schemas.report import MonthSummary, FinancialReport, VatMonth, VatReport
from vesselbook.services import reports, vessel_settings

router = APIRouter()


def check_period(year: int, month: int) -> None:
    if not 1 <= month <= 12 or not 2000 <= year <= 2100:
        raise HTTPException(status_code=404, detail="Report period not found")


@router.get("/financial", response_model=List[MonthSummary])
async def financial_index(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("reports.access")),
) -> Any:
    """Months with completed transactions, newest first"""
    return await reports.financial_index(db, ctx.vessel_id)


@router.get("/financial/{year}/{month}", response_model=FinancialReport)
async def financial_month(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("reports.access")),
    year: int,
    month: int,
) -> Any:
    check_period(year, month)
    data = await reports.financial_month(db, ctx.vessel_id, year, month)
    data["currency"] = await vessel_settings.default_currency(db, ctx.vessel_id)
    return data


@router.get("/vat", response_model=List[VatMonth])
async def vat_index(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("reports.access")),
) -> Any:
    return await reports.vat_index(db, ctx.vessel_id)


@router.get("/vat/{year}/{month}", response_model=VatReport)
async def vat_month(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("reports.access")),
    year: int,
    month: int,
) -> Any:
    check_period(year, month)
    data = await reports.vat_month(db, ctx.vessel_id, year, month)
    data["currency"] = await vessel_settings.default_currency(db, ctx.vessel_id)
    return data
