"""
Marea core helpers
- lookups
- response building
"""

from typing import List, Tuple

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404
from vesselbook.api.api_v1.endpoints.transactions import build_transaction_responses
from vesselbook.models import Marea, MareaCrew, MareaQuantityReturn, Transaction, User, CrewPosition
from vesselbook.schemas.distribution import DistributionResult
from vesselbook.schemas.marea import (
    MareaResponse, MareaDetailResponse, MareaCrewResponse, QuantityReturnResponse,
)
from vesselbook.services import mareas as marea_service


async def get_marea(db: AsyncSession, marea_id: int, vessel_id: int) -> Marea:
    return await get_or_404(db, Marea, marea_id, vessel_id, "Marea not found")


def ensure_unlocked(marea: Marea) -> None:
    if marea.is_locked:
        raise HTTPException(status_code=400, detail="Marea is closed or cancelled")


def build_marea_response(marea: Marea, totals: Tuple[int, int], response_class=MareaResponse):
    resp = response_class.model_validate(marea)
    resp.total_income, resp.total_expenses = totals
    resp.net_result = totals[0] - totals[1]
    return resp


async def build_marea_responses(db: AsyncSession, items: List[Marea]) -> List[MareaResponse]:
    totals = await marea_service.totals_for(db, [m.id for m in items])
    return [build_marea_response(m, totals[m.id]) for m in items]


async def crew_of(db: AsyncSession, marea_id: int) -> List[MareaCrewResponse]:
    result = await db.execute(
        select(MareaCrew, User, CrewPosition.name)
        .join(User, User.id == MareaCrew.user_id)
        .outerjoin(CrewPosition, CrewPosition.id == User.position_id)
        .where(MareaCrew.marea_id == marea_id)
        .order_by(User.name)
    )
    return [
        MareaCrewResponse(
            id=link.id, user_id=user.id, name=user.name, position_name=position_name, notes=link.notes,
        )
        for link, user, position_name in result.all()
    ]


async def detail_response(db: AsyncSession, marea: Marea) -> MareaDetailResponse:
    totals = await marea_service.totals(db, marea)
    resp = build_marea_response(marea, totals, MareaDetailResponse)
    resp.crew = await crew_of(db, marea.id)

    returns = (await db.execute(
        select(MareaQuantityReturn)
        .where(MareaQuantityReturn.marea_id == marea.id)
        .order_by(MareaQuantityReturn.id)
    )).scalars().all()
    resp.quantity_returns = [QuantityReturnResponse.model_validate(r) for r in returns]

    items = (await db.execute(
        select(Transaction)
        .where(Transaction.marea_id == marea.id, Transaction.not_trashed())
        .order_by(Transaction.transaction_date, Transaction.id)
    )).scalars().all()
    resp.transactions = await build_transaction_responses(db, list(items))
    resp.distribution = DistributionResult(**await marea_service.calculate(db, marea))
    return resp
