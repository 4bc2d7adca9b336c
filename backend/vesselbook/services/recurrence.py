"""
Recurring transaction generation

Each due template produces one completed transaction per missed
occurrence up to today, never past its end date.
"""

import calendar
import logging
from datetime import date, timedelta
from typing import List

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.models import RecurringTransaction, Transaction
from vesselbook.services import transactions

logger = logging.getLogger(__name__)

MONTH_STEPS = {"monthly": 1, "quarterly": 3, "yearly": 12}

# Upper bound of occurrences generated for one template in a single run
MAX_OCCURRENCES_PER_RUN = 400


def add_months(day: date, months: int, anchor_day: int = None) -> date:
    """Shift by whole months, clamping to the last day of the target month"""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(anchor_day or day.day, last_day))


def advance(day: date, frequency: str, anchor_day: int = None) -> date:
    if frequency == "daily":
        return day + timedelta(days=1)
    if frequency == "weekly":
        return day + timedelta(weeks=1)
    if frequency in MONTH_STEPS:
        return add_months(day, MONTH_STEPS[frequency], anchor_day)
    raise ValueError(f"Unknown frequency: {frequency}")


def occurrences(template: RecurringTransaction, today: date) -> List[date]:
    """Dates still to generate for a template, oldest first"""
    dates = []
    current = template.next_occurrence_date
    anchor = template.start_date.day
    while current and current <= today and len(dates) < MAX_OCCURRENCES_PER_RUN:
        if template.end_date and current > template.end_date:
            break
        dates.append(current)
        current = advance(current, template.frequency, anchor)
    return dates


async def generate_for(db: AsyncSession, template: RecurringTransaction, today: date) -> List[Transaction]:
    created = []
    anchor = template.start_date.day
    for when in occurrences(template, today):
        transaction = await transactions.build_transaction(
            db,
            template.vessel_id,
            type=template.type,
            category_id=template.category_id,
            amount=template.amount,
            transaction_date=when,
            created_by=template.created_by,
            vat_profile_id=template.vat_profile_id,
            currency=template.currency,
            house_of_zeros=template.house_of_zeros,
            supplier_id=template.supplier_id,
            bank_account_id=template.bank_account_id,
            recurring_transaction_id=template.id,
            description=template.name,
        )
        created.append(transaction)
        template.last_generated_date = when
        template.next_occurrence_date = advance(when, template.frequency, anchor)

    if template.end_date and template.next_occurrence_date and template.next_occurrence_date > template.end_date:
        template.status = "completed"
    return created


async def generate_due(db: AsyncSession, today: date = None, vessel_id: int = None) -> int:
    """Generate every due occurrence; returns the number of transactions created"""
    today = today or date.today()
    conditions = [
        RecurringTransaction.status == "active",
        RecurringTransaction.auto_generate.is_(True),
        RecurringTransaction.not_trashed(),
        RecurringTransaction.next_occurrence_date <= today,
    ]
    if vessel_id is not None:
        conditions.append(RecurringTransaction.vessel_id == vessel_id)

    templates = (await db.execute(
        select(RecurringTransaction).where(and_(*conditions)).order_by(RecurringTransaction.id)
    )).scalars().all()

    count = 0
    for template in templates:
        template_id, name = template.id, template.name
        try:
            async with db.begin_nested():
                created = await generate_for(db, template, today)
        except transactions.TransactionError as e:
            logger.error(f"❌ Recurring '{name}' (#{template_id}) skipped: {e}")
            continue
        count += len(created)
        if created:
            logger.info(f"Recurring '{name}' (#{template_id}): {len(created)} transaction(s)")

    await db.commit()
    return count
