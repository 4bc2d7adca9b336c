"""Transaction (movimentation) API"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, case, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, paginate
from vesselbook.api.api_v1.endpoints.categories import get_category
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import (
    Transaction, TransactionCategory, Supplier, User, BankAccount, Marea, Maintenance,
)
from vesselbook.models.transaction import TYPE_INCOME, TYPE_EXPENSE
from vesselbook.schemas.transaction import (
    TransactionCreate, TransactionUpdate, TransactionResponse, TransactionListResponse,
    TransactionHistoryItem,
)
from vesselbook.services import audit, transactions as transaction_service
from vesselbook.services.money import format_money

router = APIRouter()


def build_transaction_response(t: Transaction, category_name: Optional[str] = None) -> TransactionResponse:
    resp = TransactionResponse.model_validate(t)
    resp.category_name = category_name
    resp.formatted_total = format_money(t.total_amount, t.currency, t.house_of_zeros, with_symbol=True)
    return resp


async def build_transaction_responses(db: AsyncSession, items: List[Transaction]) -> List[TransactionResponse]:
    ids = {t.category_id for t in items}
    names: Dict[int, str] = {}
    if ids:
        result = await db.execute(
            select(TransactionCategory.id, TransactionCategory.name).where(TransactionCategory.id.in_(ids))
        )
        names = dict(result.all())
    return [build_transaction_response(t, names.get(t.category_id)) for t in items]


async def check_links(db: AsyncSession, vessel_id: int, transaction_type: str, data: dict) -> None:
    """Every referenced row must belong to the vessel"""
    if data.get("category_id"):
        await get_category(db, data["category_id"], vessel_id, transaction_type)
    if data.get("supplier_id"):
        await get_or_404(db, Supplier, data["supplier_id"], vessel_id, "Supplier not found")
    if data.get("crew_member_id"):
        await get_or_404(db, User, data["crew_member_id"], vessel_id, "Crew member not found")
    if data.get("bank_account_id"):
        await get_or_404(db, BankAccount, data["bank_account_id"], vessel_id, "Bank account not found")
    if data.get("marea_id"):
        marea = await get_or_404(db, Marea, data["marea_id"], vessel_id, "Marea not found")
        if marea.is_locked:
            raise HTTPException(status_code=400, detail="Cannot add transactions to a closed or cancelled marea")
    if data.get("maintenance_id"):
        maintenance = await get_or_404(db, Maintenance, data["maintenance_id"], vessel_id, "Maintenance not found")
        if not maintenance.is_open:
            raise HTTPException(status_code=400, detail="Maintenance is not open")


async def ensure_marea_unlocked(db: AsyncSession, transaction: Transaction) -> None:
    if transaction.marea_id:
        marea = await db.get(Marea, transaction.marea_id)
        if marea and marea.is_locked:
            raise HTTPException(
                status_code=400,
                detail="Transactions of a closed or cancelled marea cannot be changed",
            )


def _sums():
    return (
        func.coalesce(func.sum(case((Transaction.type == TYPE_INCOME, Transaction.total_amount), else_=0)), 0),
        func.coalesce(func.sum(case((Transaction.type == TYPE_EXPENSE, Transaction.total_amount), else_=0)), 0),
    )


@router.get("/", response_model=TransactionListResponse)
async def list_transactions(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.view")),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    category_id: Optional[int] = Query(None),
    supplier_id: Optional[int] = Query(None),
    marea_id: Optional[int] = Query(None),
    maintenance_id: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    search: Optional[str] = Query(None),
) -> Any:
    conditions = [Transaction.vessel_id == ctx.vessel_id, Transaction.not_trashed()]
    if type:
        conditions.append(Transaction.type == type)
    if status:
        conditions.append(Transaction.status == status)
    if category_id:
        conditions.append(Transaction.category_id == category_id)
    if supplier_id:
        conditions.append(Transaction.supplier_id == supplier_id)
    if marea_id:
        conditions.append(Transaction.marea_id == marea_id)
    if maintenance_id:
        conditions.append(Transaction.maintenance_id == maintenance_id)
    if month:
        conditions.append(Transaction.transaction_month == month)
    if year:
        conditions.append(Transaction.transaction_year == year)
    if search:
        conditions.append(or_(
            Transaction.transaction_number.contains(search),
            Transaction.reference.contains(search),
            Transaction.description.contains(search),
        ))

    items, total = await paginate(
        db, select(Transaction).where(and_(*conditions)), page, limit,
        Transaction.transaction_date.desc(), Transaction.id.desc(),
    )
    income, expenses = (await db.execute(select(*_sums()).where(and_(*conditions)))).one()

    return TransactionListResponse(
        data=await build_transaction_responses(db, items),
        total=total,
        page=page,
        limit=limit,
        total_income=int(income),
        total_expenses=int(expenses),
    )


@router.get("/history", response_model=List[TransactionHistoryItem])
async def transaction_history(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.view")),
) -> Any:
    """Per month totals, newest first"""
    income, expenses = _sums()
    result = await db.execute(
        select(Transaction.transaction_year, Transaction.transaction_month, func.count(Transaction.id), income, expenses)
        .where(Transaction.vessel_id == ctx.vessel_id, Transaction.not_trashed())
        .group_by(Transaction.transaction_year, Transaction.transaction_month)
        .order_by(Transaction.transaction_year.desc(), Transaction.transaction_month.desc())
    )
    return [
        TransactionHistoryItem(
            year=year, month=month, count=n,
            total_income=int(inc), total_expenses=int(exp), net=int(inc) - int(exp),
        )
        for year, month, n, inc, exp in result.all()
    ]


@router.post("/", response_model=TransactionResponse)
async def create_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.create")),
    transaction_in: TransactionCreate,
) -> Any:
    data = transaction_in.model_dump()
    await check_links(db, ctx.vessel_id, transaction_in.type, data)

    amount = transaction_in.amount
    if amount is None:
        amount = transaction_service.amount_from_units(transaction_in.amount_per_unit, transaction_in.quantity)

    try:
        transaction = await transaction_service.build_transaction(
            db,
            ctx.vessel_id,
            type=transaction_in.type,
            category_id=transaction_in.category_id,
            amount=amount,
            transaction_date=transaction_in.transaction_date,
            created_by=ctx.user.id,
            vat_profile_id=transaction_in.vat_profile_id,
            amount_includes_vat=transaction_in.amount_includes_vat,
            currency=transaction_in.currency,
            house_of_zeros=transaction_in.house_of_zeros,
            status=transaction_in.status,
            amount_per_unit=transaction_in.amount_per_unit,
            quantity=transaction_in.quantity,
            supplier_id=transaction_in.supplier_id,
            crew_member_id=transaction_in.crew_member_id,
            bank_account_id=transaction_in.bank_account_id,
            marea_id=transaction_in.marea_id,
            maintenance_id=transaction_in.maintenance_id,
            description=transaction_in.description,
            notes=transaction_in.notes,
        )
    except transaction_service.TransactionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit.log_create(db, ctx, transaction)
    await db.commit()
    await db.refresh(transaction)
    return (await build_transaction_responses(db, [transaction]))[0]


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.view")),
    transaction_id: int,
) -> Any:
    transaction = await get_or_404(db, Transaction, transaction_id, ctx.vessel_id, "Transaction not found")
    return (await build_transaction_responses(db, [transaction]))[0]


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.edit")),
    transaction_id: int,
    transaction_in: TransactionUpdate,
) -> Any:
    transaction = await get_or_404(db, Transaction, transaction_id, ctx.vessel_id, "Transaction not found")
    await ensure_marea_unlocked(db, transaction)

    update_data = transaction_in.model_dump(exclude_unset=True)
    includes_vat = update_data.pop("amount_includes_vat", False)
    new_type = update_data.get("type", transaction.type)
    if "category_id" in update_data or "type" in update_data:
        update_data.setdefault("category_id", transaction.category_id)
    await check_links(db, ctx.vessel_id, new_type, update_data)

    before = audit.snapshot(transaction)
    new_date = update_data.pop("transaction_date", None)
    amount = update_data.pop("amount", None)
    vat_profile_id = update_data.pop("vat_profile_id", None)
    for field, value in update_data.items():
        setattr(transaction, field, value)
    if new_date:
        transaction_service.set_date(transaction, new_date)

    money_fields = {"amount", "amount_per_unit", "quantity", "type", "vat_profile_id"}
    if money_fields & transaction_in.model_fields_set or includes_vat:
        if amount is None and ("amount_per_unit" in update_data or "quantity" in update_data):
            amount = transaction_service.amount_from_units(transaction.amount_per_unit, transaction.quantity)
        if amount is None:
            amount, includes_vat = transaction.amount, False
        try:
            profile = await transaction_service.resolve_vat_profile(
                db, ctx.vessel_id, transaction.type, vat_profile_id or transaction.vat_profile_id
            )
        except transaction_service.TransactionError as e:
            raise HTTPException(status_code=400, detail=str(e))
        transaction_service.apply_amounts(transaction, amount, profile, includes_vat)

    audit.log_update(db, ctx, transaction, before)
    await db.commit()
    await db.refresh(transaction)
    return (await build_transaction_responses(db, [transaction]))[0]


@router.delete("/{transaction_id}")
async def delete_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.delete")),
    transaction_id: int,
) -> Any:
    """Move the transaction to the recycle bin"""
    transaction = await get_or_404(db, Transaction, transaction_id, ctx.vessel_id, "Transaction not found")
    await ensure_marea_unlocked(db, transaction)
    transaction.soft_delete()
    audit.log_delete(db, ctx, transaction)
    await db.commit()
    return {"message": "Transaction moved to the recycle bin"}
