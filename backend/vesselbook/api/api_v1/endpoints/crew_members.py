"""Crew member API

Crew members are users attached to the vessel through users.vessel_id.
"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, paginate
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import User, CrewPosition, SalaryCompensation
from vesselbook.schemas.crew import (
    CrewMemberCreate, CrewMemberUpdate, CrewMemberResponse, CrewMemberListResponse,
    SalaryCompensationIn, SalaryCompensationResponse,
)
from vesselbook.services import audit

router = APIRouter()


async def active_salary(db: AsyncSession, user_id: int) -> Optional[SalaryCompensation]:
    result = await db.execute(
        select(SalaryCompensation)
        .where(SalaryCompensation.user_id == user_id, SalaryCompensation.is_active.is_(True))
        .order_by(SalaryCompensation.id.desc())
    )
    return result.scalars().first()


async def build_member_response(db: AsyncSession, user: User) -> CrewMemberResponse:
    resp = CrewMemberResponse.model_validate(user)
    if user.position_id:
        position = await db.get(CrewPosition, user.position_id)
        resp.position_name = position.name if position else None
    salary = await active_salary(db, user.id)
    if salary:
        resp.salary = SalaryCompensationResponse.model_validate(salary)
    return resp


async def get_member(db: AsyncSession, member_id: int, vessel_id: int) -> User:
    return await get_or_404(db, User, member_id, vessel_id, "Crew member not found")


async def check_position(db: AsyncSession, position_id: Optional[int], vessel_id: int):
    if position_id:
        await get_or_404(db, CrewPosition, position_id, vessel_id, "Crew position not found")


async def set_salary(db: AsyncSession, user_id: int, salary_in: SalaryCompensationIn) -> SalaryCompensation:
    """Replace the active compensation of a crew member"""
    current = await active_salary(db, user_id)
    if current:
        current.is_active = False
    salary = SalaryCompensation(user_id=user_id, **salary_in.model_dump())
    db.add(salary)
    await db.flush()
    return salary


@router.get("/", response_model=CrewMemberListResponse)
async def list_members(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew.view")),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    position_id: Optional[int] = Query(None),
) -> Any:
    conditions = [User.vessel_id == ctx.vessel_id, User.not_trashed()]
    if search:
        conditions.append(or_(User.name.contains(search), User.email.contains(search)))
    if status:
        conditions.append(User.status == status)
    if position_id:
        conditions.append(User.position_id == position_id)

    users, total = await paginate(db, select(User).where(and_(*conditions)), page, limit, User.name)
    data = [await build_member_response(db, user) for user in users]
    return CrewMemberListResponse(data=data, total=total, page=page, limit=limit)


@router.post("/", response_model=CrewMemberResponse)
async def create_member(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew.create")),
    member_in: CrewMemberCreate,
) -> Any:
    """Add a crew member; an existing user with the same e-mail is attached instead"""
    await check_position(db, member_in.position_id, ctx.vessel_id)
    data = member_in.model_dump(exclude={"salary"})

    user = (await db.execute(select(User).where(User.email == member_in.email))).scalars().first()
    if user:
        if user.vessel_id and user.vessel_id != ctx.vessel_id and not user.is_trashed:
            raise HTTPException(status_code=400, detail="User is crew of another vessel")
        if user.vessel_id == ctx.vessel_id and not user.is_trashed:
            raise HTTPException(status_code=400, detail="User is already crew of this vessel")
        user.restore()
        for field, value in data.items():
            setattr(user, field, value)
        user.vessel_id = ctx.vessel_id
    else:
        user = User(**data, user_type="employee_of_vessel", vessel_id=ctx.vessel_id)
        db.add(user)
    await db.flush()

    if member_in.salary:
        await set_salary(db, user.id, member_in.salary)

    audit.log_create(db, ctx, user)
    await db.commit()
    await db.refresh(user)
    return await build_member_response(db, user)


@router.get("/{member_id}", response_model=CrewMemberResponse)
async def get_member_detail(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew.view")),
    member_id: int,
) -> Any:
    user = await get_member(db, member_id, ctx.vessel_id)
    return await build_member_response(db, user)


@router.put("/{member_id}", response_model=CrewMemberResponse)
async def update_member(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew.edit")),
    member_id: int,
    member_in: CrewMemberUpdate,
) -> Any:
    user = await get_member(db, member_id, ctx.vessel_id)
    update_data = member_in.model_dump(exclude_unset=True)

    if "position_id" in update_data:
        await check_position(db, update_data["position_id"], ctx.vessel_id)
    email = update_data.get("email")
    if email and email != user.email:
        taken = (await db.execute(select(User.id).where(User.email == email, User.id != user.id))).first()
        if taken:
            raise HTTPException(status_code=400, detail="E-mail already in use")

    before = audit.snapshot(user)
    for field, value in update_data.items():
        setattr(user, field, value)
    audit.log_update(db, ctx, user, before)
    await db.commit()
    await db.refresh(user)
    return await build_member_response(db, user)


@router.put("/{member_id}/salary", response_model=SalaryCompensationResponse)
async def update_salary(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew.edit")),
    member_id: int,
    salary_in: SalaryCompensationIn,
) -> Any:
    user = await get_member(db, member_id, ctx.vessel_id)
    salary = await set_salary(db, user.id, salary_in)
    audit.log_action(db, ctx, user, "update", f"changed the salary of '{user.name}'")
    await db.commit()
    await db.refresh(salary)
    return salary


@router.delete("/{member_id}")
async def delete_member(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("crew.delete")),
    member_id: int,
) -> Any:
    """Detach a crew member from the vessel; vessel employees are also soft deleted"""
    user = await get_member(db, member_id, ctx.vessel_id)
    if user.id == ctx.user.id:
        raise HTTPException(status_code=400, detail="You cannot remove yourself")

    audit.log_delete(db, ctx, user)
    user.vessel_id = None
    user.position_id = None
    if not user.is_account:
        user.soft_delete()
    await db.commit()
    return {"message": "Crew member removed"}
