"""Bank account API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import count, get_or_404
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import BankAccount, Transaction, RecurringTransaction
from vesselbook.schemas.bank_account import BankAccountCreate, BankAccountUpdate, BankAccountResponse
from vesselbook.services import audit, vessel_settings
from vesselbook.services.money import format_money

router = APIRouter()


def build_account_response(account: BankAccount, currency: str) -> BankAccountResponse:
    resp = BankAccountResponse.model_validate(account)
    resp.formatted_balance = format_money(account.current_balance, currency, with_symbol=True)
    return resp


@router.get("/", response_model=List[BankAccountResponse])
async def list_accounts(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("bank-accounts.view")),
    status: Optional[str] = Query(None),
) -> Any:
    query = select(BankAccount).where(BankAccount.vessel_id == ctx.vessel_id)
    if status:
        query = query.where(BankAccount.status == status)
    accounts = (await db.execute(query.order_by(BankAccount.name))).scalars().all()
    currency = await vessel_settings.default_currency(db, ctx.vessel_id)
    return [build_account_response(a, currency) for a in accounts]


@router.post("/", response_model=BankAccountResponse)
async def create_account(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("bank-accounts.create")),
    account_in: BankAccountCreate,
) -> Any:
    account = BankAccount(
        **account_in.model_dump(),
        current_balance=account_in.initial_balance,
        vessel_id=ctx.vessel_id,
    )
    db.add(account)
    await db.flush()
    audit.log_create(db, ctx, account)
    currency = await vessel_settings.default_currency(db, ctx.vessel_id)
    await db.commit()
    await db.refresh(account)
    return build_account_response(account, currency)


@router.get("/{account_id}", response_model=BankAccountResponse)
async def get_account(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("bank-accounts.view")),
    account_id: int,
) -> Any:
    account = await get_or_404(db, BankAccount, account_id, ctx.vessel_id, "Bank account not found")
    return build_account_response(account, await vessel_settings.default_currency(db, ctx.vessel_id))


@router.put("/{account_id}", response_model=BankAccountResponse)
async def update_account(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("bank-accounts.edit")),
    account_id: int,
    account_in: BankAccountUpdate,
) -> Any:
    account = await get_or_404(db, BankAccount, account_id, ctx.vessel_id, "Bank account not found")
    before = audit.snapshot(account)
    for field, value in account_in.model_dump(exclude_unset=True).items():
        setattr(account, field, value)
    audit.log_update(db, ctx, account, before)
    currency = await vessel_settings.default_currency(db, ctx.vessel_id)
    await db.commit()
    await db.refresh(account)
    return build_account_response(account, currency)


@router.delete("/{account_id}")
async def delete_account(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("bank-accounts.delete")),
    account_id: int,
) -> Any:
    account = await get_or_404(db, BankAccount, account_id, ctx.vessel_id, "Bank account not found")
    used = await count(db, Transaction.id, Transaction.bank_account_id == account.id)
    used += await count(db, RecurringTransaction.id, RecurringTransaction.bank_account_id == account.id)
    if used:
        raise HTTPException(
            status_code=400,
            detail=f"Bank account is used by {used} transaction(s) and cannot be deleted",
        )
    audit.log_delete(db, ctx, account)
    await db.delete(account)
    await db.commit()
    return {"message": "Bank account deleted"}
