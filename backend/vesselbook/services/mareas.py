"""Marea totals and distribution loading"""

from typing import Any, Dict, List, Tuple, Type

from sqlalchemy import select, func, case, delete
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.models import (
    Marea, Transaction, MareaDistributionItem, MareaDistributionProfile, MareaDistributionProfileItem,
)
from vesselbook.models.transaction import TYPE_INCOME, TYPE_EXPENSE
from vesselbook.services import distribution


async def totals_for(db: AsyncSession, marea_ids: List[int]) -> Dict[int, Tuple[int, int]]:
    """{marea_id: (income, expenses)} over the non-trashed transactions"""
    if not marea_ids:
        return {}
    result = await db.execute(
        select(
            Transaction.marea_id,
            func.coalesce(func.sum(case((Transaction.type == TYPE_INCOME, Transaction.total_amount), else_=0)), 0),
            func.coalesce(func.sum(case((Transaction.type == TYPE_EXPENSE, Transaction.total_amount), else_=0)), 0),
        )
        .where(Transaction.marea_id.in_(marea_ids), Transaction.not_trashed())
        .group_by(Transaction.marea_id)
    )
    totals = {marea_id: (0, 0) for marea_id in marea_ids}
    for marea_id, income, expenses in result.all():
        totals[marea_id] = (int(income), int(expenses))
    return totals


async def totals(db: AsyncSession, marea: Marea) -> Tuple[int, int]:
    return (await totals_for(db, [marea.id]))[marea.id]


async def distribution_items(db: AsyncSession, marea: Marea) -> Tuple[List[Any], bool]:
    """Marea override items when present, otherwise the profile's items"""
    overrides = (await db.execute(
        select(MareaDistributionItem)
        .where(MareaDistributionItem.marea_id == marea.id)
        .order_by(MareaDistributionItem.order_index)
    )).scalars().all()
    if overrides:
        return list(overrides), True

    if not marea.distribution_profile_id:
        return [], False
    profile = await db.get(MareaDistributionProfile, marea.distribution_profile_id)
    if not profile or profile.is_trashed:
        return [], False
    items = (await db.execute(
        select(MareaDistributionProfileItem)
        .where(MareaDistributionProfileItem.distribution_profile_id == profile.id)
        .order_by(MareaDistributionProfileItem.order_index)
    )).scalars().all()
    return list(items), False


async def calculate(db: AsyncSession, marea: Marea) -> Dict[str, Any]:
    income, expenses = await totals(db, marea)
    items, uses_overrides = [], False
    if marea.use_calculation:
        items, uses_overrides = await distribution_items(db, marea)
    return distribution.calculate(
        items,
        income,
        expenses,
        currency=marea.currency,
        house_of_zeros=marea.house_of_zeros,
        enabled=marea.use_calculation,
        uses_overrides=uses_overrides,
    )


async def replace_items(db: AsyncSession, model: Type, items_in: List[Any], **owner) -> List[Any]:
    """
    Replace the rule rows of a profile or marea

    Rows are created first, then the order-index references are mapped
    to the new row ids. References to unknown indexes are dropped.
    """
    distribution.check_references(items_in)

    owner_column, owner_id = next(iter(owner.items()))
    await db.execute(delete(model).where(getattr(model, owner_column) == owner_id))

    created = []
    for item_in in items_in:
        data = item_in.model_dump(exclude={"reference_item_order_index", "reference_operation_item_order_index"})
        row = model(**data, **owner)
        db.add(row)
        created.append(row)
    await db.flush()

    id_by_index = {row.order_index: row.id for row in created}
    for row, item_in in zip(created, items_in):
        row.reference_item_id = id_by_index.get(item_in.reference_item_order_index)
        row.reference_operation_item_id = id_by_index.get(item_in.reference_operation_item_order_index)
    await db.flush()
    return created
