"""Recurring transaction API"""

from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, paginate
from vesselbook.api.api_v1.endpoints.categories import get_category
from vesselbook.core.config import settings
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import RecurringTransaction, Supplier, BankAccount, VatProfile
from vesselbook.schemas.recurring_transaction import (
    RecurringTransactionCreate, RecurringTransactionUpdate, RecurringTransactionResponse,
    RecurringTransactionListResponse, GenerateResponse,
)
from vesselbook.services import audit, recurrence, vessel_settings

router = APIRouter()


async def check_links(db: AsyncSession, vessel_id: int, transaction_type: str, data: dict) -> None:
    if data.get("category_id"):
        await get_category(db, data["category_id"], vessel_id, transaction_type)
    if data.get("supplier_id"):
        await get_or_404(db, Supplier, data["supplier_id"], vessel_id, "Supplier not found")
    if data.get("bank_account_id"):
        await get_or_404(db, BankAccount, data["bank_account_id"], vessel_id, "Bank account not found")
    if data.get("vat_profile_id"):
        profile = await db.get(VatProfile, data["vat_profile_id"])
        if not profile or not profile.is_active:
            raise HTTPException(status_code=404, detail="VAT profile not found")


@router.get("/", response_model=RecurringTransactionListResponse)
async def list_recurring(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.view")),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
) -> Any:
    conditions = [RecurringTransaction.vessel_id == ctx.vessel_id, RecurringTransaction.not_trashed()]
    if status:
        conditions.append(RecurringTransaction.status == status)
    if type:
        conditions.append(RecurringTransaction.type == type)
    items, total = await paginate(
        db, select(RecurringTransaction).where(and_(*conditions)), page, limit,
        RecurringTransaction.next_occurrence_date, RecurringTransaction.id,
    )
    return RecurringTransactionListResponse(
        data=[RecurringTransactionResponse.model_validate(i) for i in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("/", response_model=RecurringTransactionResponse)
async def create_recurring(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.create")),
    recurring_in: RecurringTransactionCreate,
) -> Any:
    data = recurring_in.model_dump()
    await check_links(db, ctx.vessel_id, recurring_in.type, data)

    data["currency"] = (data.get("currency") or await vessel_settings.default_currency(db, ctx.vessel_id)).upper()
    recurring = RecurringTransaction(
        **data,
        vessel_id=ctx.vessel_id,
        house_of_zeros=settings.DEFAULT_HOUSE_OF_ZEROS,
        next_occurrence_date=recurring_in.start_date,
        status="active",
        created_by=ctx.user.id,
    )
    db.add(recurring)
    await db.flush()
    audit.log_create(db, ctx, recurring)
    await db.commit()
    await db.refresh(recurring)
    return recurring


@router.post("/generate", response_model=GenerateResponse)
async def generate_now(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.create")),
) -> Any:
    """Generate the due occurrences of this vessel without waiting for the daily job"""
    generated = await recurrence.generate_due(db, date.today(), vessel_id=ctx.vessel_id)
    return GenerateResponse(generated=generated)


@router.get("/{recurring_id}", response_model=RecurringTransactionResponse)
async def get_recurring(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.view")),
    recurring_id: int,
) -> Any:
    return await get_or_404(db, RecurringTransaction, recurring_id, ctx.vessel_id, "Recurring transaction not found")


@router.put("/{recurring_id}", response_model=RecurringTransactionResponse)
async def update_recurring(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.edit")),
    recurring_id: int,
    recurring_in: RecurringTransactionUpdate,
) -> Any:
    recurring = await get_or_404(db, RecurringTransaction, recurring_id, ctx.vessel_id, "Recurring transaction not found")
    update_data = recurring_in.model_dump(exclude_unset=True)
    await check_links(db, ctx.vessel_id, recurring.type, update_data)

    end_date = update_data.get("end_date", recurring.end_date)
    if end_date and end_date < recurring.start_date:
        raise HTTPException(status_code=400, detail="end_date must be on or after start_date")

    before = audit.snapshot(recurring)
    for field, value in update_data.items():
        setattr(recurring, field, value)
    audit.log_update(db, ctx, recurring, before)
    await db.commit()
    await db.refresh(recurring)
    return recurring


@router.delete("/{recurring_id}")
async def delete_recurring(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.delete")),
    recurring_id: int,
) -> Any:
    recurring = await get_or_404(db, RecurringTransaction, recurring_id, ctx.vessel_id, "Recurring transaction not found")
    recurring.soft_delete()
    audit.log_delete(db, ctx, recurring)
    await db.commit()
    return {"message": "Recurring transaction moved to the recycle bin"}
