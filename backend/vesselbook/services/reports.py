"""
Financial and VAT report aggregation

Only completed, non-trashed transactions are counted. Amounts are cents.
"""

import calendar
from collections import defaultdict
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, case, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.models import (
    Transaction, TransactionCategory, VatProfile, Marea, MareaQuantityReturn, Maintenance,
)
from vesselbook.models.transaction import TYPE_INCOME, TYPE_EXPENSE, STATUS_COMPLETED
from vesselbook.models.marea import STATUS_AT_SEA, STATUS_PREPARING
from vesselbook.models.maintenance import STATUS_OPEN


def month_label(month: int) -> str:
    return calendar.month_name[month]


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def percent_change(current: int, previous: int, signed: bool = False) -> float:
    """Change vs previous in percent; 0 when there is nothing to compare with"""
    if signed:
        if previous == 0:
            return 0.0
        return round((current - previous) / abs(previous) * 100, 2)
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 2)


def _counted(vessel_id: int):
    return and_(
        Transaction.vessel_id == vessel_id,
        Transaction.status == STATUS_COMPLETED,
        Transaction.not_trashed(),
    )


def _income_sum():
    return func.coalesce(func.sum(case((Transaction.type == TYPE_INCOME, Transaction.total_amount), else_=0)), 0)


def _expense_sum():
    return func.coalesce(func.sum(case((Transaction.type == TYPE_EXPENSE, Transaction.total_amount), else_=0)), 0)


def split_totals(transactions: List[Transaction]) -> Tuple[int, int]:
    income = sum(t.total_amount for t in transactions if t.type == TYPE_INCOME)
    expenses = sum(t.total_amount for t in transactions if t.type == TYPE_EXPENSE)
    return income, expenses


async def _month_transactions(db: AsyncSession, vessel_id: int, year: int, month: int,
                              *extra) -> List[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(
            _counted(vessel_id),
            Transaction.transaction_year == year,
            Transaction.transaction_month == month,
            *extra,
        )
        .order_by(Transaction.transaction_date, Transaction.id)
    )
    return list(result.scalars().all())


async def _names(db: AsyncSession, model, ids) -> Dict[int, Any]:
    ids = {i for i in ids if i}
    if not ids:
        return {}
    result = await db.execute(select(model).where(model.id.in_(ids)))
    return {row.id: row for row in result.scalars().all()}


async def financial_index(db: AsyncSession, vessel_id: int) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(
            Transaction.transaction_year,
            Transaction.transaction_month,
            func.count(Transaction.id),
            _income_sum(),
            _expense_sum(),
        )
        .where(_counted(vessel_id))
        .group_by(Transaction.transaction_year, Transaction.transaction_month)
        .order_by(Transaction.transaction_year.desc(), Transaction.transaction_month.desc())
    )
    rows = []
    for year, month, count, income, expenses in result.all():
        rows.append({
            "year": year,
            "month": month,
            "month_label": month_label(month),
            "count": count,
            "total_income": int(income),
            "total_expenses": int(expenses),
            "net_balance": int(income) - int(expenses),
        })
    return rows


def category_breakdown(transactions: List[Transaction], categories: Dict[int, TransactionCategory]) -> List[Dict[str, Any]]:
    groups: Dict[Optional[int], List[Transaction]] = defaultdict(list)
    for t in transactions:
        groups[t.category_id].append(t)

    rows = []
    for category_id, items in groups.items():
        category = categories.get(category_id)
        income, expenses = split_totals(items)
        rows.append({
            "category_id": category_id,
            "category_name": category.name if category else "Uncategorized",
            "category_type": category.type if category else None,
            "category_color": category.color if category else None,
            "income": income,
            "expenses": expenses,
            "count": len(items),
        })
    rows.sort(key=lambda r: r["expenses"], reverse=True)
    return rows


def daily_breakdown(transactions: List[Transaction]) -> List[Dict[str, Any]]:
    groups: Dict[date, List[Transaction]] = defaultdict(list)
    for t in transactions:
        groups[t.transaction_date].append(t)

    rows = []
    for day in sorted(groups):
        income, expenses = split_totals(groups[day])
        rows.append({
            "date": day,
            "income": income,
            "expenses": expenses,
            "net": income - expenses,
            "count": len(groups[day]),
        })
    return rows


async def _mareas_in_month(db: AsyncSession, vessel_id: int, year: int, month: int,
                           transactions: List[Transaction]) -> List[Dict[str, Any]]:
    """Mareas whose trip overlaps the month or that own a transaction of the month"""
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    start = func.coalesce(Marea.actual_departure_date, Marea.estimated_departure_date)
    end = func.coalesce(Marea.actual_return_date, Marea.estimated_return_date)
    own_ids = {t.marea_id for t in transactions if t.marea_id}

    overlap = and_(start.is_not(None), start <= last, or_(end.is_(None), end >= first))
    condition = or_(overlap, Marea.id.in_(own_ids)) if own_ids else overlap
    mareas = (await db.execute(
        select(Marea)
        .where(Marea.vessel_id == vessel_id, Marea.not_trashed(), condition)
        .order_by(Marea.id)
    )).scalars().all()
    if not mareas:
        return []

    marea_ids = [m.id for m in mareas]
    returns = defaultdict(list)
    for qr in (await db.execute(
        select(MareaQuantityReturn).where(MareaQuantityReturn.marea_id.in_(marea_ids))
    )).scalars().all():
        returns[qr.marea_id].append({"name": qr.name, "quantity": float(qr.quantity)})

    rows = []
    for marea in mareas:
        own = [t for t in transactions if t.marea_id == marea.id]
        income, expenses = split_totals(own)
        rows.append({
            "id": marea.id,
            "marea_number": marea.marea_number,
            "name": marea.name,
            "status": marea.status,
            "actual_departure_date": marea.actual_departure_date,
            "actual_return_date": marea.actual_return_date,
            "estimated_departure_date": marea.estimated_departure_date,
            "estimated_return_date": marea.estimated_return_date,
            "total_income": income,
            "total_expenses": expenses,
            "net_result": income - expenses,
            "transaction_count": len(own),
            "quantity_returns": returns[marea.id],
        })
    return rows


async def financial_month(db: AsyncSession, vessel_id: int, year: int, month: int) -> Dict[str, Any]:
    transactions = await _month_transactions(db, vessel_id, year, month)
    income, expenses = split_totals(transactions)
    net = income - expenses

    prev_year, prev_month = previous_month(year, month)
    prev_income, prev_expenses = split_totals(await _month_transactions(db, vessel_id, prev_year, prev_month))

    categories = await _names(db, TransactionCategory, (t.category_id for t in transactions))
    return {
        "year": year,
        "month": month,
        "month_label": month_label(month),
        "summary": {
            "total_income": income,
            "total_expenses": expenses,
            "net_balance": net,
            "transaction_count": len(transactions),
            "income_change": percent_change(income, prev_income),
            "expenses_change": percent_change(expenses, prev_expenses),
            "net_change": percent_change(net, prev_income - prev_expenses, signed=True),
        },
        "category_breakdown": category_breakdown(transactions, categories),
        "daily_breakdown": daily_breakdown(transactions),
        "mareas": await _mareas_in_month(db, vessel_id, year, month, transactions),
    }


def _vat_filter():
    return and_(Transaction.type == TYPE_INCOME, Transaction.vat_amount > 0)


async def vat_index(db: AsyncSession, vessel_id: int) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(
            Transaction.transaction_year,
            Transaction.transaction_month,
            func.count(Transaction.id),
            func.coalesce(func.sum(Transaction.vat_amount), 0),
        )
        .where(_counted(vessel_id), _vat_filter())
        .group_by(Transaction.transaction_year, Transaction.transaction_month)
        .order_by(Transaction.transaction_year.desc(), Transaction.transaction_month.desc())
    )
    return [
        {
            "year": year,
            "month": month,
            "month_label": month_label(month),
            "count": count,
            "total_vat": int(total_vat),
        }
        for year, month, count, total_vat in result.all()
    ]


def _vat_group(rows: List[Transaction]) -> Dict[str, int]:
    return {
        "base_amount": sum(t.amount for t in rows),
        "vat_amount": sum(t.vat_amount for t in rows),
        "total_amount": sum(t.total_amount for t in rows),
        "count": len(rows),
    }


async def vat_month(db: AsyncSession, vessel_id: int, year: int, month: int) -> Dict[str, Any]:
    transactions = await _month_transactions(db, vessel_id, year, month, _vat_filter())
    totals = _vat_group(transactions)

    prev_year, prev_month = previous_month(year, month)
    previous = _vat_group(await _month_transactions(db, vessel_id, prev_year, prev_month, _vat_filter()))

    profiles = await _names(db, VatProfile, (t.vat_profile_id for t in transactions))
    categories = await _names(db, TransactionCategory, (t.category_id for t in transactions))
    mareas = await _names(db, Marea, (t.marea_id for t in transactions))

    def grouped(key) -> Dict[Any, List[Transaction]]:
        groups = defaultdict(list)
        for t in transactions:
            groups[key(t)].append(t)
        return groups

    by_profile = []
    for profile_id, rows in grouped(lambda t: t.vat_profile_id).items():
        profile = profiles.get(profile_id)
        by_profile.append({
            "vat_profile_id": profile_id,
            "name": profile.name if profile else "Unknown",
            "percentage": float(profile.percentage) if profile else 0.0,
            **_vat_group(rows),
            "transactions": [
                {
                    "id": t.id,
                    "transaction_number": t.transaction_number,
                    "transaction_date": t.transaction_date,
                    "description": t.description,
                    "amount": t.amount,
                    "vat_amount": t.vat_amount,
                    "total_amount": t.total_amount,
                }
                for t in rows
            ],
        })
    by_profile.sort(key=lambda r: r["vat_amount"], reverse=True)

    by_category = []
    for category_id, rows in grouped(lambda t: t.category_id).items():
        category = categories.get(category_id)
        by_category.append({
            "category_id": category_id,
            "name": category.name if category else "Uncategorized",
            **_vat_group(rows),
        })
    by_category.sort(key=lambda r: r["vat_amount"], reverse=True)

    by_day = [
        {"date": day, **_vat_group(rows)}
        for day, rows in sorted(grouped(lambda t: t.transaction_date).items())
    ]

    by_marea = []
    for marea_id, rows in grouped(lambda t: t.marea_id).items():
        if not marea_id:
            continue
        marea = mareas.get(marea_id)
        by_marea.append({
            "marea_id": marea_id,
            "marea_number": marea.marea_number if marea else None,
            "name": marea.name if marea else None,
            **_vat_group(rows),
        })

    return {
        "year": year,
        "month": month,
        "month_label": month_label(month),
        "summary": {
            **totals,
            "vat_change": percent_change(totals["vat_amount"], previous["vat_amount"]),
            "base_change": percent_change(totals["base_amount"], previous["base_amount"]),
        },
        "by_vat_profile": by_profile,
        "by_category": by_category,
        "by_day": by_day,
        "by_marea": by_marea,
    }


async def dashboard(db: AsyncSession, vessel_id: int, today: date = None) -> Dict[str, Any]:
    today = today or date.today()
    current = split_totals(await _month_transactions(db, vessel_id, today.year, today.month))

    series = []
    year, month = today.year, today.month
    for _ in range(6):
        income, expenses = split_totals(await _month_transactions(db, vessel_id, year, month))
        series.append({
            "year": year,
            "month": month,
            "month_label": month_label(month),
            "income": income,
            "expenses": expenses,
            "net": income - expenses,
        })
        year, month = previous_month(year, month)
    series.reverse()

    active_marea = (await db.execute(
        select(Marea)
        .where(Marea.vessel_id == vessel_id, Marea.status == STATUS_AT_SEA, Marea.not_trashed())
        .order_by(Marea.actual_departure_date.desc(), Marea.id.desc())
        .limit(1)
    )).scalars().first()

    preparing = (await db.execute(
        select(Marea)
        .where(Marea.vessel_id == vessel_id, Marea.status == STATUS_PREPARING, Marea.not_trashed())
        .order_by(Marea.estimated_departure_date, Marea.id)
    )).scalars().all()

    recent = (await db.execute(
        select(Transaction)
        .where(Transaction.vessel_id == vessel_id, Transaction.not_trashed())
        .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        .limit(5)
    )).scalars().all()

    open_maintenances = (await db.execute(
        select(func.count(Maintenance.id)).where(
            Maintenance.vessel_id == vessel_id,
            Maintenance.status == STATUS_OPEN,
            Maintenance.not_trashed(),
        )
    )).scalar() or 0

    return {
        "current_month": {
            "year": today.year,
            "month": today.month,
            "total_income": current[0],
            "total_expenses": current[1],
            "net_balance": current[0] - current[1],
        },
        "last_six_months": series,
        "is_at_sea": active_marea is not None,
        "active_marea": active_marea,
        "preparing_mareas": list(preparing),
        "recent_transactions": list(recent),
        "open_maintenances": open_maintenances,
    }
