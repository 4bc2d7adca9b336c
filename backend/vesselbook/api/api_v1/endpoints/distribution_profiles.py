"""Marea distribution profile API"""

from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, count
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import Marea, MareaDistributionProfile, MareaDistributionProfileItem
from vesselbook.schemas.distribution import (
    ProfileCreate, ProfileUpdate, ProfileResponse, DistributionItemResponse,
    PreviewRequest, DistributionResult,
)
from vesselbook.services import audit, distribution, vessel_settings, mareas as marea_service

router = APIRouter()


async def get_profile(db: AsyncSession, profile_id: int, vessel_id: int) -> MareaDistributionProfile:
    return await get_or_404(db, MareaDistributionProfile, profile_id, vessel_id, "Distribution profile not found")


async def build_profile_responses(db: AsyncSession, profiles: List[MareaDistributionProfile]) -> List[ProfileResponse]:
    ids = [p.id for p in profiles]
    items: Dict[int, List[DistributionItemResponse]] = {pid: [] for pid in ids}
    if ids:
        rows = (await db.execute(
            select(MareaDistributionProfileItem)
            .where(MareaDistributionProfileItem.distribution_profile_id.in_(ids))
            .order_by(MareaDistributionProfileItem.order_index)
        )).scalars().all()
        for row in rows:
            items[row.distribution_profile_id].append(DistributionItemResponse.model_validate(row))

    responses = []
    for profile in profiles:
        resp = ProfileResponse.model_validate(profile)
        resp.items = items[profile.id]
        responses.append(resp)
    return responses


async def clear_default(db: AsyncSession, vessel_id: int, keep_id: int) -> None:
    """At most one default profile per vessel"""
    await db.execute(
        update(MareaDistributionProfile)
        .where(
            MareaDistributionProfile.vessel_id == vessel_id,
            MareaDistributionProfile.id != keep_id,
        )
        .values(is_default=False)
    )


async def save_items(db: AsyncSession, profile: MareaDistributionProfile, items_in) -> None:
    try:
        await marea_service.replace_items(
            db, MareaDistributionProfileItem, items_in, distribution_profile_id=profile.id
        )
    except distribution.DistributionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[ProfileResponse])
async def list_profiles(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("distribution-profiles.view")),
) -> Any:
    result = await db.execute(
        select(MareaDistributionProfile)
        .where(MareaDistributionProfile.vessel_id == ctx.vessel_id, MareaDistributionProfile.not_trashed())
        .order_by(MareaDistributionProfile.is_default.desc(), MareaDistributionProfile.name)
    )
    return await build_profile_responses(db, list(result.scalars().all()))


@router.post("/preview", response_model=DistributionResult)
async def preview_distribution(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("distribution-profiles.view")),
    preview_in: PreviewRequest,
) -> Any:
    """Evaluate unsaved items against the given totals"""
    try:
        distribution.check_references(preview_in.items)
    except distribution.DistributionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return distribution.calculate(
        distribution.rules_from_input(preview_in.items),
        preview_in.total_income,
        preview_in.total_expenses,
        currency=preview_in.currency or await vessel_settings.default_currency(db, ctx.vessel_id),
        house_of_zeros=preview_in.house_of_zeros,
    )


@router.post("/", response_model=ProfileResponse)
async def create_profile(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("distribution-profiles.create")),
    profile_in: ProfileCreate,
) -> Any:
    profile = MareaDistributionProfile(
        **profile_in.model_dump(exclude={"items"}),
        vessel_id=ctx.vessel_id,
        created_by=ctx.user.id,
    )
    db.add(profile)
    await db.flush()
    if profile.is_default:
        await clear_default(db, ctx.vessel_id, profile.id)
    await save_items(db, profile, profile_in.items)

    audit.log_create(db, ctx, profile)
    await db.commit()
    await db.refresh(profile)
    return (await build_profile_responses(db, [profile]))[0]


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile_detail(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("distribution-profiles.view")),
    profile_id: int,
) -> Any:
    profile = await get_profile(db, profile_id, ctx.vessel_id)
    return (await build_profile_responses(db, [profile]))[0]


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("distribution-profiles.edit")),
    profile_id: int,
    profile_in: ProfileUpdate,
) -> Any:
    profile = await get_profile(db, profile_id, ctx.vessel_id)
    update_data = profile_in.model_dump(exclude_unset=True, exclude={"items"})

    before = audit.snapshot(profile)
    for field, value in update_data.items():
        setattr(profile, field, value)
    if update_data.get("is_default"):
        await clear_default(db, ctx.vessel_id, profile.id)
    if profile_in.items is not None:
        await save_items(db, profile, profile_in.items)

    audit.log_update(db, ctx, profile, before)
    await db.commit()
    await db.refresh(profile)
    return (await build_profile_responses(db, [profile]))[0]


@router.delete("/{profile_id}")
async def delete_profile(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("distribution-profiles.delete")),
    profile_id: int,
) -> Any:
    profile = await get_profile(db, profile_id, ctx.vessel_id)
    if profile.is_system:
        raise HTTPException(status_code=400, detail="System profiles cannot be deleted")
    in_use = await count(
        db, Marea.id, Marea.distribution_profile_id == profile.id, Marea.not_trashed()
    )
    if in_use:
        raise HTTPException(status_code=400, detail=f"Profile is used by {in_use} marea(s)")

    profile.soft_delete()
    profile.is_default = False
    audit.log_delete(db, ctx, profile)
    await db.commit()
    return {"message": "Distribution profile moved to the recycle bin"}
