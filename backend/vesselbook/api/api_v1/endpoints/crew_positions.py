"""Crew position API"""

from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import count, get_or_404
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import CrewPosition, User
from vesselbook.schemas.crew import CrewPositionCreate, CrewPositionUpdate, CrewPositionResponse
from vesselbook.services import audit

router = APIRouter()


async def name_taken(db: AsyncSession, vessel_id: int, name: str, exclude_id: int = None) -> bool:
    conditions = [CrewPosition.vessel_id == vessel_id, CrewPosition.name == name]
    if exclude_id:
        conditions.append(CrewPosition.id != exclude_id)
    return await count(db, CrewPosition.id, *conditions) > 0


@router.get("/", response_model=List[CrewPositionResponse])
async def list_positions(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew-roles.view")),
) -> Any:
    crew_count = (
        select(func.count(User.id))
        .where(User.position_id == CrewPosition.id, User.not_trashed())
        .correlate(CrewPosition)
        .scalar_subquery()
    )
    result = await db.execute(
        select(CrewPosition, crew_count)
        .where(CrewPosition.vessel_id == ctx.vessel_id)
        .order_by(CrewPosition.name)
    )
    data = []
    for position, members in result.all():
        resp = CrewPositionResponse.model_validate(position)
        resp.crew_count = members or 0
        data.append(resp)
    return data


@router.post("/", response_model=CrewPositionResponse)
async def create_position(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew-roles.create")),
    position_in: CrewPositionCreate,
) -> Any:
    if await name_taken(db, ctx.vessel_id, position_in.name):
        raise HTTPException(status_code=400, detail="A position with this name already exists")

    position = CrewPosition(**position_in.model_dump(), vessel_id=ctx.vessel_id)
    db.add(position)
    await db.flush()
    audit.log_create(db, ctx, position)
    await db.commit()
    await db.refresh(position)
    return position


@router.put("/{position_id}", response_model=CrewPositionResponse)
async def update_position(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew-roles.edit")),
    position_id: int,
    position_in: CrewPositionUpdate,
) -> Any:
    position = await get_or_404(db, CrewPosition, position_id, ctx.vessel_id, "Crew position not found")
    update_data = position_in.model_dump(exclude_unset=True)
    if update_data.get("name") and await name_taken(db, ctx.vessel_id, update_data["name"], position.id):
        raise HTTPException(status_code=400, detail="A position with this name already exists")

    before = audit.snapshot(position)
    for field, value in update_data.items():
        setattr(position, field, value)
    audit.log_update(db, ctx, position, before)
    await db.commit()
    await db.refresh(position)
    return position


@router.delete("/{position_id}")
async def delete_position(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew-roles.delete")),
    position_id: int,
) -> Any:
    position = await get_or_404(db, CrewPosition, position_id, ctx.vessel_id, "Crew position not found")
    members = await count(db, User.id, User.position_id == position.id, User.not_trashed())
    if members:
        raise HTTPException(status_code=400, detail=f"Position is assigned to {members} crew member(s)")

    audit.log_delete(db, ctx, position)
    await db.delete(position)
    await db.commit()
    return {"message": "Crew position deleted"}
