"""Vessel management API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import count
from vesselbook.core.deps import (
    get_db, get_current_user, get_user_role, require_permission, VesselContext,
)
from vesselbook.core.permissions import granted
from vesselbook.models import (
    User, Vessel, VesselSetting, VesselRoleAccess, VesselUserRole, Transaction,
)
from vesselbook.schemas.vessel import (
    VesselCreate, VesselUpdate, VesselResponse, VesselListResponse, MemberAssign, MemberResponse,
)
from vesselbook.services import audit, vessel_settings

router = APIRouter()


def build_vessel_response(vessel: Vessel, role: Optional[str] = None) -> VesselResponse:
    resp = VesselResponse.model_validate(vessel)
    resp.status_display = vessel.status_display
    resp.role = role
    resp.permissions = granted(role) if role else []
    return resp


async def get_role_access(db: AsyncSession, name: str) -> VesselRoleAccess:
    result = await db.execute(select(VesselRoleAccess).where(VesselRoleAccess.name == name))
    role_access = result.scalars().first()
    if not role_access:
        raise HTTPException(status_code=500, detail=f"Role '{name}' is not seeded")
    return role_access


async def assign_role(db: AsyncSession, user_id: int, vessel_id: int, role_name: str) -> VesselUserRole:
    role_access = await get_role_access(db, role_name)
    user_role = (await db.execute(
        select(VesselUserRole).where(and_(
            VesselUserRole.user_id == user_id, VesselUserRole.vessel_id == vessel_id
        ))
    )).scalars().first()
    if user_role:
        user_role.vessel_role_access_id = role_access.id
        user_role.role_access = role_access
        user_role.is_active = True
    else:
        user_role = VesselUserRole(
            user_id=user_id, vessel_id=vessel_id, vessel_role_access_id=role_access.id, is_active=True
        )
        user_role.role_access = role_access
        db.add(user_role)
    return user_role


@router.get("/", response_model=VesselListResponse)
async def list_vessels(
    *,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Any:
    """Vessels the user has an active role on"""
    result = await db.execute(
        select(Vessel, VesselUserRole)
        .join(VesselUserRole, VesselUserRole.vessel_id == Vessel.id)
        .where(VesselUserRole.user_id == user.id, VesselUserRole.is_active.is_(True))
        .order_by(Vessel.name)
    )
    data = [build_vessel_response(vessel, user_role.role_name) for vessel, user_role in result.all()]
    return VesselListResponse(data=data, total=len(data))


@router.post("/", response_model=VesselResponse)
async def create_vessel(
    *,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    vessel_in: VesselCreate,
) -> Any:
    """Create a vessel; the creator becomes its owner and administrator"""
    if not user.is_account:
        raise HTTPException(status_code=403, detail="Only account users can create vessels")

    if await count(db, Vessel.id, Vessel.registration_number == vessel_in.registration_number):
        raise HTTPException(status_code=400, detail="Registration number already in use")

    vessel = Vessel(**vessel_in.model_dump(), owner_id=user.id)
    db.add(vessel)
    await db.flush()

    user_role = await assign_role(db, user.id, vessel.id, "administrator")
    await vessel_settings.get_for_vessel(db, vessel.id)

    ctx = VesselContext(vessel=vessel, user=user, role=user_role.role_name)
    audit.log_create(db, ctx, vessel)
    await db.commit()
    await db.refresh(vessel)
    return build_vessel_response(vessel, user_role.role_name)


@router.get("/{vessel_id}", response_model=VesselResponse)
async def get_vessel(
    *,
    ctx: VesselContext = Depends(require_permission("vessels.view")),
) -> Any:
    return build_vessel_response(ctx.vessel, ctx.role)


@router.put("/{vessel_id}", response_model=VesselResponse)
async def update_vessel(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("vessels.edit")),
    vessel_in: VesselUpdate,
) -> Any:
    vessel = ctx.vessel
    update_data = vessel_in.model_dump(exclude_unset=True)

    number = update_data.get("registration_number")
    if number and number != vessel.registration_number:
        if await count(db, Vessel.id, Vessel.registration_number == number, Vessel.id != vessel.id):
            raise HTTPException(status_code=400, detail="Registration number already in use")

    before = audit.snapshot(vessel)
    for field, value in update_data.items():
        setattr(vessel, field, value)
    audit.log_update(db, ctx, vessel, before)

    await db.commit()
    await db.refresh(vessel)
    return build_vessel_response(vessel, ctx.role)


@router.delete("/{vessel_id}")
async def delete_vessel(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("vessels.delete")),
) -> Any:
    vessel = ctx.vessel
    transactions = await count(db, Transaction.id, Transaction.vessel_id == vessel.id)
    if transactions:
        raise HTTPException(
            status_code=400,
            detail=f"Vessel has {transactions} transaction(s) and cannot be deleted",
        )

    roles = (await db.execute(
        select(VesselUserRole).where(VesselUserRole.vessel_id == vessel.id)
    )).scalars().all()
    for user_role in roles:
        await db.delete(user_role)
    await db.execute(delete(VesselSetting).where(VesselSetting.vessel_id == vessel.id))

    audit.log_delete(db, ctx, vessel)
    await db.delete(vessel)
    await db.commit()
    return {"message": "Vessel deleted"}


@router.get("/{vessel_id}/members", response_model=List[MemberResponse])
async def list_members(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("users.manage")),
) -> Any:
    result = await db.execute(
        select(User, VesselUserRole)
        .join(VesselUserRole, VesselUserRole.user_id == User.id)
        .where(VesselUserRole.vessel_id == ctx.vessel_id, VesselUserRole.is_active.is_(True))
        .order_by(User.name)
    )
    return [
        MemberResponse(
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user_role.role_access.name,
            role_name=user_role.role_name,
            is_owner=user.id == ctx.vessel.owner_id,
        )
        for user, user_role in result.all()
    ]


@router.put("/{vessel_id}/members", response_model=MemberResponse)
async def assign_member(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("users.manage")),
    member_in: MemberAssign,
) -> Any:
    """Give a user a role on the vessel, or change their role"""
    user = None
    if member_in.user_id:
        user = await db.get(User, member_in.user_id)
    elif member_in.email:
        user = (await db.execute(select(User).where(User.email == member_in.email))).scalars().first()
    if not user or user.is_trashed:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == ctx.vessel.owner_id and member_in.role != "administrator":
        raise HTTPException(status_code=400, detail="The vessel owner must stay administrator")

    user_role = await assign_role(db, user.id, ctx.vessel_id, member_in.role)
    audit.log_action(db, ctx, user, "update", f"set role of '{user.email}' to {user_role.role_name}")
    await db.commit()

    return MemberResponse(
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=member_in.role,
        role_name=user_role.role_name,
        is_owner=user.id == ctx.vessel.owner_id,
    )


@router.delete("/{vessel_id}/members/{user_id}")
async def revoke_member(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("users.manage")),
    user_id: int,
) -> Any:
    if user_id == ctx.vessel.owner_id:
        raise HTTPException(status_code=400, detail="The vessel owner cannot be removed")
    user_role = await get_user_role(db, user_id, ctx.vessel_id)
    if not user_role:
        raise HTTPException(status_code=404, detail="User has no role on this vessel")

    user_role.is_active = False
    user = await db.get(User, user_id)
    audit.log_action(db, ctx, user, "update", f"removed '{user.email}' from the vessel")
    await db.commit()
    return {"message": "Access revoked"}
