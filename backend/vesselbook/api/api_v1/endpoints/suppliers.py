"""Supplier API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, paginate
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import Supplier, Transaction
from vesselbook.schemas.supplier import (
    SupplierCreate, SupplierUpdate, SupplierResponse, SupplierListResponse,
)
from vesselbook.services import audit

router = APIRouter()


async def transaction_counts(db: AsyncSession, supplier_ids) -> dict:
    if not supplier_ids:
        return {}
    result = await db.execute(
        select(Transaction.supplier_id, func.count(Transaction.id))
        .where(Transaction.supplier_id.in_(supplier_ids), Transaction.not_trashed())
        .group_by(Transaction.supplier_id)
    )
    return dict(result.all())


@router.get("/", response_model=SupplierListResponse)
async def list_suppliers(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("suppliers.view")),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
) -> Any:
    conditions = [Supplier.vessel_id == ctx.vessel_id, Supplier.not_trashed()]
    if search:
        conditions.append(or_(
            Supplier.company_name.contains(search),
            Supplier.email.contains(search),
            Supplier.phone.contains(search),
        ))

    suppliers, total = await paginate(
        db, select(Supplier).where(and_(*conditions)), page, limit, Supplier.company_name
    )
    counts = await transaction_counts(db, [s.id for s in suppliers])
    data = []
    for s in suppliers:
        resp = SupplierResponse.model_validate(s)
        resp.transaction_count = counts.get(s.id, 0)
        data.append(resp)
    return SupplierListResponse(data=data, total=total, page=page, limit=limit)


@router.post("/", response_model=SupplierResponse)
async def create_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("suppliers.create")),
    supplier_in: SupplierCreate,
) -> Any:
    supplier = Supplier(**supplier_in.model_dump(), vessel_id=ctx.vessel_id)
    db.add(supplier)
    await db.flush()
    audit.log_create(db, ctx, supplier)
    await db.commit()
    await db.refresh(supplier)
    return supplier


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("suppliers.view")),
    supplier_id: int,
) -> Any:
    supplier = await get_or_404(db, Supplier, supplier_id, ctx.vessel_id, "Supplier not found")
    resp = SupplierResponse.model_validate(supplier)
    resp.transaction_count = (await transaction_counts(db, [supplier.id])).get(supplier.id, 0)
    return resp


@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("suppliers.edit")),
    supplier_id: int,
    supplier_in: SupplierUpdate,
) -> Any:
    supplier = await get_or_404(db, Supplier, supplier_id, ctx.vessel_id, "Supplier not found")
    before = audit.snapshot(supplier)
    for field, value in supplier_in.model_dump(exclude_unset=True).items():
        setattr(supplier, field, value)
    audit.log_update(db, ctx, supplier, before)
    await db.commit()
    await db.refresh(supplier)
    return supplier


@router.delete("/{supplier_id}")
async def delete_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("suppliers.delete")),
    supplier_id: int,
) -> Any:
    """Move the supplier to the recycle bin"""
    supplier = await get_or_404(db, Supplier, supplier_id, ctx.vessel_id, "Supplier not found")
    supplier.soft_delete()
    audit.log_delete(db, ctx, supplier)
    await db.commit()
    return {"message": "Supplier moved to the recycle bin"}
