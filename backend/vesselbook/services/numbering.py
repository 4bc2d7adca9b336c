"""
Document numbers

    TRX{year}{seq:06d}           transactions, per year
    REF{year}{month}{seq:06d}    transaction references, per month
    MARE{year}{seq:06d}          mareas, per vessel
    MANT{year}{seq:06d}          maintenances, per vessel
"""

from datetime import date
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.models import Transaction, Marea, Maintenance, VesselSetting

SEQUENCE_WIDTH = 6


def parse_sequence(number: Optional[str], prefix: str) -> Optional[int]:
    """Trailing sequence of a number with the given prefix, None if not parseable"""
    if not number or not number.startswith(prefix):
        return None
    tail = number[len(prefix):][-SEQUENCE_WIDTH:]
    try:
        return int(tail)
    except ValueError:
        return None


def format_number(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:0{SEQUENCE_WIDTH}d}"


async def _max_number(db: AsyncSession, column, *conditions) -> Optional[str]:
    result = await db.execute(select(func.max(column)).where(*conditions))
    return result.scalar()


async def next_transaction_number(db: AsyncSession, today: date = None) -> str:
    # Transaction numbers are unique across vessels, trashed rows included
    prefix = f"TRX{(today or date.today()).year}"
    last = await _max_number(db, Transaction.transaction_number, Transaction.transaction_number.like(f"{prefix}%"))
    return format_number(prefix, (parse_sequence(last, prefix) or 0) + 1)


async def next_reference(db: AsyncSession, today: date = None) -> str:
    today = today or date.today()
    prefix = f"REF{today.year}{today.month:02d}"
    last = await _max_number(db, Transaction.reference, Transaction.reference.like(f"{prefix}%"))
    return format_number(prefix, (parse_sequence(last, prefix) or 0) + 1)


async def next_marea_number(db: AsyncSession, vessel_id: int, today: date = None) -> str:
    """
    Next marea number of the vessel

    The sequence continues from the vessel's most recent marea; the first
    marea starts at the vessel setting's starting_marea_number.
    """
    prefix = f"MARE{(today or date.today()).year}"
    result = await db.execute(
        select(Marea.marea_number)
        .where(Marea.vessel_id == vessel_id, Marea.not_trashed())
        .order_by(Marea.id.desc())
        .limit(1)
    )
    last = result.scalar()
    sequence = None
    if last:
        # Any MARE prefix counts so the sequence does not restart each year
        previous = parse_sequence(last, "MARE")
        if previous is not None:
            sequence = previous + 1
    if sequence is None:
        starting = (await db.execute(
            select(VesselSetting.starting_marea_number).where(VesselSetting.vessel_id == vessel_id)
        )).scalar()
        sequence = starting or 1

    number = format_number(prefix, sequence)
    while await marea_number_taken(db, vessel_id, number):
        sequence += 1
        number = format_number(prefix, sequence)
    return number


async def marea_number_taken(db: AsyncSession, vessel_id: int, number: str, exclude_id: int = None) -> bool:
    conditions = [
        Marea.vessel_id == vessel_id,
        Marea.marea_number == number,
        Marea.not_trashed(),
    ]
    if exclude_id:
        conditions.append(Marea.id != exclude_id)
    result = await db.execute(select(func.count(Marea.id)).where(*conditions))
    return (result.scalar() or 0) > 0


async def next_maintenance_number(db: AsyncSession, vessel_id: int, today: date = None) -> str:
    prefix = f"MANT{(today or date.today()).year}"
    last = await _max_number(
        db, Maintenance.maintenance_number,
        Maintenance.vessel_id == vessel_id,
        Maintenance.maintenance_number.like(f"{prefix}%"),
    )
    return format_number(prefix, (parse_sequence(last, prefix) or 0) + 1)
