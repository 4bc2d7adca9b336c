"""
Recycle bin

Soft-deleted rows of the trashable models, per vessel. Restoring or
permanently deleting a marea or maintenance carries its transactions
along.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import select, delete, update, and_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.models import (
    Transaction, Supplier, RecurringTransaction, Marea, Maintenance,
    MareaCrew, MareaQuantityReturn, MareaDistributionItem,
    MareaDistributionProfile, MareaDistributionProfileItem,
)
from vesselbook.services import audit


@dataclass(frozen=True)
class TrashType:
    model: Type
    label_column: str
    title: str


TRASH_TYPES: Dict[str, TrashType] = {
    "transaction": TrashType(Transaction, "transaction_number", "Transaction"),
    "supplier": TrashType(Supplier, "company_name", "Supplier"),
    "recurring_transaction": TrashType(RecurringTransaction, "name", "Recurring transaction"),
    "marea": TrashType(Marea, "marea_number", "Marea"),
    "maintenance": TrashType(Maintenance, "maintenance_number", "Maintenance"),
    "distribution_profile": TrashType(MareaDistributionProfile, "name", "Distribution profile"),
}


class UnknownTrashType(KeyError):
    pass


def trash_type(name: str) -> TrashType:
    try:
        return TRASH_TYPES[name]
    except KeyError:
        raise UnknownTrashType(name)


def _describe(type_name: str, obj: Any) -> Optional[str]:
    if type_name == "transaction":
        return obj.description
    if type_name == "marea":
        return obj.name
    if type_name == "maintenance":
        return obj.name
    return getattr(obj, "description", None)


async def trashed(db: AsyncSession, vessel_id: int, type_name: str, search: str = None) -> List[Any]:
    kind = trash_type(type_name)
    model = kind.model
    conditions = [model.vessel_id == vessel_id, model.only_trashed()]
    if search:
        conditions.append(getattr(model, kind.label_column).contains(search))
    result = await db.execute(select(model).where(and_(*conditions)))
    return list(result.scalars().all())


async def list_items(db: AsyncSession, vessel_id: int, type_name: str = None,
                     search: str = None) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
    """Trashed rows newest first, plus the count per type"""
    items = []
    counts = {}
    for name, kind in TRASH_TYPES.items():
        rows = await trashed(db, vessel_id, name, search)
        counts[name] = len(rows)
        if type_name and name != type_name:
            continue
        for obj in rows:
            items.append({
                "type": name,
                "type_label": kind.title,
                "id": obj.id,
                "label": getattr(obj, kind.label_column),
                "description": _describe(name, obj),
                "deleted_at": obj.deleted_at,
            })
    items.sort(key=lambda item: item["deleted_at"], reverse=True)
    return items, counts


async def get_trashed(db: AsyncSession, vessel_id: int, type_name: str, item_id: int) -> Optional[Any]:
    model = trash_type(type_name).model
    result = await db.execute(
        select(model).where(model.id == item_id, model.vessel_id == vessel_id, model.only_trashed())
    )
    return result.scalars().first()


async def restore(db: AsyncSession, ctx, type_name: str, obj: Any) -> None:
    obj.restore()
    if type_name == "marea":
        await db.execute(
            update(Transaction)
            .where(Transaction.marea_id == obj.id, Transaction.only_trashed())
            .values(deleted_at=None)
        )
    elif type_name == "maintenance":
        await db.execute(
            update(Transaction)
            .where(Transaction.maintenance_id == obj.id, Transaction.only_trashed())
            .values(deleted_at=None)
        )
    audit.log_restore(db, ctx, obj)


async def force_delete(db: AsyncSession, ctx, type_name: str, obj: Any) -> None:
    if type_name == "marea":
        await db.execute(delete(Transaction).where(Transaction.marea_id == obj.id, Transaction.only_trashed()))
        await db.execute(update(Transaction).where(Transaction.marea_id == obj.id).values(marea_id=None))
        await db.execute(delete(MareaQuantityReturn).where(MareaQuantityReturn.marea_id == obj.id))
        await db.execute(delete(MareaCrew).where(MareaCrew.marea_id == obj.id))
        await db.execute(delete(MareaDistributionItem).where(MareaDistributionItem.marea_id == obj.id))
    elif type_name == "maintenance":
        await db.execute(
            delete(Transaction).where(Transaction.maintenance_id == obj.id, Transaction.only_trashed())
        )
        await db.execute(
            update(Transaction).where(Transaction.maintenance_id == obj.id).values(maintenance_id=None)
        )
    elif type_name == "supplier":
        await db.execute(update(Transaction).where(Transaction.supplier_id == obj.id).values(supplier_id=None))
        await db.execute(
            update(RecurringTransaction).where(RecurringTransaction.supplier_id == obj.id).values(supplier_id=None)
        )
    elif type_name == "distribution_profile":
        await db.execute(
            delete(MareaDistributionProfileItem)
            .where(MareaDistributionProfileItem.distribution_profile_id == obj.id)
        )
        await db.execute(
            update(Marea).where(Marea.distribution_profile_id == obj.id).values(distribution_profile_id=None)
        )
    elif type_name == "recurring_transaction":
        await db.execute(
            update(Transaction)
            .where(Transaction.recurring_transaction_id == obj.id)
            .values(recurring_transaction_id=None)
        )

    audit.log_force_delete(db, ctx, obj)
    await db.delete(obj)


async def empty(db: AsyncSession, ctx, vessel_id: int) -> int:
    """Permanently delete everything trashed for the vessel; returns the number of rows"""
    count = 0
    # Parents first so their trashed transactions go with them
    for name in ("marea", "maintenance", "recurring_transaction", "supplier", "distribution_profile", "transaction"):
        for obj in await trashed(db, vessel_id, name):
            await force_delete(db, ctx, name, obj)
            count += 1
        await db.flush()
    return count
