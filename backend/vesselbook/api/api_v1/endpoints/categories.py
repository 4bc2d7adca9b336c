"""Transaction category API"""

from typing import Any, List, Optional, Literal
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import count
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import TransactionCategory, Transaction, RecurringTransaction
from vesselbook.schemas.category import CategoryCreate, CategoryResponse
from vesselbook.services import audit

router = APIRouter()


def visible_to(vessel_id: int):
    return or_(TransactionCategory.vessel_id.is_(None), TransactionCategory.vessel_id == vessel_id)


async def get_category(db: AsyncSession, category_id: int, vessel_id: int,
                       expected_type: Optional[str] = None) -> TransactionCategory:
    category = await db.get(TransactionCategory, category_id)
    if not category or category.vessel_id not in (None, vessel_id):
        raise HTTPException(status_code=404, detail="Category not found")
    if expected_type and expected_type in ("income", "expense") and category.type != expected_type:
        raise HTTPException(status_code=400, detail=f"Category is not an {expected_type} category")
    return category


@router.get("/", response_model=List[CategoryResponse])
async def list_categories(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("movimentations.view")),
    type: Optional[Literal["income", "expense"]] = Query(None),
) -> Any:
    query = select(TransactionCategory).where(visible_to(ctx.vessel_id))
    if type:
        query = query.where(TransactionCategory.type == type)
    result = await db.execute(query.order_by(TransactionCategory.type, TransactionCategory.name))
    return result.scalars().all()


@router.post("/", response_model=CategoryResponse)
async def create_category(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("settings.access")),
    category_in: CategoryCreate,
) -> Any:
    if category_in.parent_id:
        parent = await get_category(db, category_in.parent_id, ctx.vessel_id)
        if parent.type != category_in.type:
            raise HTTPException(status_code=400, detail="Parent category has a different type")

    if await count(
        db, TransactionCategory.id,
        visible_to(ctx.vessel_id),
        TransactionCategory.name == category_in.name,
        TransactionCategory.type == category_in.type,
    ):
        raise HTTPException(status_code=400, detail="Category already exists")

    category = TransactionCategory(**category_in.model_dump(), vessel_id=ctx.vessel_id, is_system=False)
    db.add(category)
    await db.flush()
    audit.log_create(db, ctx, category)
    await db.commit()
    await db.refresh(category)
    return category


@router.delete("/{category_id}")
async def delete_category(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("settings.access")),
    category_id: int,
) -> Any:
    category = await get_category(db, category_id, ctx.vessel_id)
    if category.is_system or category.vessel_id is None:
        raise HTTPException(status_code=400, detail="System categories cannot be deleted")

    used = await count(db, Transaction.id, Transaction.category_id == category.id)
    used += await count(db, RecurringTransaction.id, RecurringTransaction.category_id == category.id)
    if used:
        raise HTTPException(status_code=400, detail=f"Category is used by {used} transaction(s)")

    audit.log_delete(db, ctx, category)
    await db.delete(category)
    await db.commit()
    return {"message": "Category deleted"}
