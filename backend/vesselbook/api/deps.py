"""Lookup helpers shared by the endpoints"""
from typing import Any, Type

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession


async def get_or_404(db: AsyncSession, model: Type, obj_id: int, vessel_id: int,
                     detail: str = "Not found") -> Any:
    """Row of `model` owned by the vessel; trashed rows count as missing"""
    obj = await db.get(model, obj_id)
    if not obj or getattr(obj, "vessel_id", None) != vessel_id:
        raise HTTPException(status_code=404, detail=detail)
    if getattr(obj, "deleted_at", None) is not None:
        raise HTTPException(status_code=404, detail=detail)
    return obj


async def count(db: AsyncSession, column, *conditions) -> int:
    result = await db.execute(select(func.count(column)).where(*conditions))
    return result.scalar() or 0


async def paginate(db: AsyncSession, query, page: int, limit: int, *order_by):
    """(rows, total) for a select"""
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
    if order_by:
        query = query.order_by(*order_by)
    query = query.offset((page - 1) * limit).limit(limit)
    rows = (await db.execute(query)).scalars().all()
    return list(rows), total
