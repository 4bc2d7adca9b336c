"""VAT profile API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.deps import get_db, get_current_user
from vesselbook.models import User, VatProfile
from vesselbook.schemas.category import VatProfileResponse

router = APIRouter()


@router.get("/", response_model=List[VatProfileResponse])
async def list_vat_profiles(
    *,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    country_code: Optional[str] = Query(None, min_length=2, max_length=2),
) -> Any:
    query = select(VatProfile).where(VatProfile.is_active.is_(True))
    if country_code:
        query = query.where(VatProfile.country_code == country_code.upper())
    result = await db.execute(query.order_by(VatProfile.is_default.desc(), VatProfile.name))
    return result.scalars().all()
