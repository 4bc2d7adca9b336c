"""Request dependencies: database session, acting user, vessel access"""
from dataclasses import dataclass, field
from typing import AsyncGenerator, Dict, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.permissions import permissions_for
from vesselbook.db.session import SessionLocal
from vesselbook.models import User, Vessel, VesselUserRole


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    x_user_id: Optional[int] = Header(None),
) -> User:
    """
    The acting user, taken from the X-User-Id header

    Authentication happens upstream (reverse proxy / gateway); this
    service only trusts the forwarded id.
    """
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    user = await db.get(User, x_user_id)
    if not user or user.deleted_at is not None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


@dataclass
class VesselContext:
    vessel: Vessel
    user: User
    role: str
    permissions: Dict[str, bool] = field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @property
    def vessel_id(self) -> int:
        return self.vessel.id

    def can(self, permission: str) -> bool:
        return self.permissions.get(permission, False)


async def get_user_role(db: AsyncSession, user_id: int, vessel_id: int) -> Optional[VesselUserRole]:
    result = await db.execute(
        select(VesselUserRole).where(and_(
            VesselUserRole.user_id == user_id,
            VesselUserRole.vessel_id == vessel_id,
            VesselUserRole.is_active.is_(True),
        ))
    )
    return result.scalars().first()


async def get_vessel_context(
    vessel_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> VesselContext:
    vessel = await db.get(Vessel, vessel_id)
    if not vessel:
        raise HTTPException(status_code=404, detail="Vessel not found")

    user_role = await get_user_role(db, user.id, vessel_id)
    if not user_role:
        raise HTTPException(status_code=403, detail="You do not have access to this vessel")

    role = user_role.role_name
    return VesselContext(
        vessel=vessel,
        user=user,
        role=role,
        permissions=permissions_for(role),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def require_permission(permission: str):
    """Dependency factory: vessel context of a user holding `permission`"""

    async def checker(ctx: VesselContext = Depends(get_vessel_context)) -> VesselContext:
        if not ctx.can(permission):
            raise HTTPException(
                status_code=403,
                detail=f"You do not have permission to {permission.replace('.', ' ')}",
            )
        return ctx

    return checker
