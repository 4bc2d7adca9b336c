"""Crew salaries for a marea"""

from datetime import date
from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404
from vesselbook.api.api_v1.endpoints.crew_members import active_salary
from vesselbook.api.api_v1.endpoints.transactions import build_transaction_response
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.db.init_db import SALARY_CATEGORY
from vesselbook.models import BankAccount, TransactionCategory, User
from vesselbook.models.marea import Marea
from vesselbook.models.transaction import TYPE_EXPENSE
from vesselbook.schemas.marea import SalaryDataResponse, SalaryPaymentIn
from vesselbook.schemas.transaction import TransactionResponse
from vesselbook.services import audit, mareas as marea_service, transactions as transaction_service
from vesselbook.services.money import format_money
from .core import get_marea

router = APIRouter()


async def salary_data(db: AsyncSession, marea: Marea, user: User) -> SalaryDataResponse:
    income, _ = await marea_service.totals(db, marea)
    salary = await active_salary(db, user.id)
    amount = salary.amount_for(income) if salary else 0
    return SalaryDataResponse(
        user_id=user.id,
        name=user.name,
        compensation_type=salary.compensation_type if salary else None,
        fixed_amount=salary.fixed_amount if salary else None,
        percentage=float(salary.percentage) if salary and salary.percentage is not None else None,
        total_income=income,
        amount=amount,
        formatted_amount=format_money(amount, marea.currency, marea.house_of_zeros, with_symbol=True),
        currency=marea.currency,
    )


@router.get("/{marea_id}/salary/{user_id}", response_model=SalaryDataResponse)
async def get_salary_data(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.view")),
    marea_id: int,
    user_id: int,
) -> Any:
    """Amount owed to a crew member for this marea"""
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    user = await get_or_404(db, User, user_id, ctx.vessel_id, "Crew member not found")
    return await salary_data(db, marea, user)


@router.post("/{marea_id}/salary", response_model=TransactionResponse)
async def pay_salary(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.create")),
    marea_id: int,
    payment_in: SalaryPaymentIn,
) -> Any:
    """Record a salary payment as an expense of the marea"""
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    if marea.is_locked:
        raise HTTPException(status_code=400, detail="Cannot add transactions to a closed or cancelled marea")
    user = await get_or_404(db, User, payment_in.user_id, ctx.vessel_id, "Crew member not found")
    if payment_in.bank_account_id:
        await get_or_404(db, BankAccount, payment_in.bank_account_id, ctx.vessel_id, "Bank account not found")

    amount = payment_in.amount
    if amount is None:
        amount = (await salary_data(db, marea, user)).amount
    if amount <= 0:
        raise HTTPException(status_code=400, detail="No salary amount to pay")

    category = (await db.execute(
        select(TransactionCategory).where(
            TransactionCategory.name == SALARY_CATEGORY,
            TransactionCategory.type == TYPE_EXPENSE,
            TransactionCategory.vessel_id.is_(None),
        )
    )).scalars().first()
    if not category:
        raise HTTPException(status_code=400, detail=f"Category '{SALARY_CATEGORY}' is missing")

    transaction = await transaction_service.build_transaction(
        db, ctx.vessel_id,
        type=TYPE_EXPENSE,
        category_id=category.id,
        amount=amount,
        transaction_date=payment_in.transaction_date or date.today(),
        created_by=ctx.user.id,
        currency=marea.currency,
        house_of_zeros=marea.house_of_zeros,
        description=f"Salary {user.name} - marea {marea.marea_number}",
        notes=payment_in.notes,
        marea_id=marea.id,
        crew_member_id=user.id,
        bank_account_id=payment_in.bank_account_id,
    )
    audit.log_create(db, ctx, transaction)
    await db.commit()
    await db.refresh(transaction)
    return build_transaction_response(transaction, category.name)
