"""
Transaction building rules shared by the movimentations endpoints, the
recurring generator and marea salary payments.

VAT applies to income only. When amount_includes_vat is set the given
amount is the gross total and is split into base and VAT.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.config import settings
from vesselbook.models import Transaction, VatProfile
from vesselbook.models.transaction import TYPE_INCOME, STATUS_COMPLETED
from vesselbook.services import money, numbering, vessel_settings


class TransactionError(ValueError):
    pass


async def resolve_vat_profile(db: AsyncSession, vessel_id: int, transaction_type: str,
                              vat_profile_id: Optional[int] = None) -> Optional[VatProfile]:
    """Requested profile, then the vessel setting's, then the default profile; income only"""
    if transaction_type != TYPE_INCOME:
        return None
    if vat_profile_id:
        profile = await db.get(VatProfile, vat_profile_id)
        if not profile or not profile.is_active:
            raise TransactionError("VAT profile not found")
        return profile

    setting = await vessel_settings.get_for_vessel(db, vessel_id)
    if setting.vat_profile_id:
        profile = await db.get(VatProfile, setting.vat_profile_id)
        if profile and profile.is_active:
            return profile

    result = await db.execute(
        select(VatProfile).where(VatProfile.is_default.is_(True), VatProfile.is_active.is_(True))
    )
    return result.scalars().first()


def apply_amounts(transaction: Transaction, amount: int, vat_profile: Optional[VatProfile],
                  amount_includes_vat: bool = False) -> None:
    """Fill amount, vat_amount and total_amount (all cents)"""
    rate = vat_profile.percentage if vat_profile else Decimal(0)
    if transaction.type != TYPE_INCOME:
        rate = Decimal(0)
        vat_profile = None

    if amount_includes_vat:
        base, vat = money.split_total_including_vat(amount, rate)
    else:
        base, vat = amount, money.calculate_vat(amount, rate)

    transaction.vat_profile_id = vat_profile.id if vat_profile else None
    transaction.amount = base
    transaction.vat_amount = vat
    transaction.total_amount = base + vat


def set_date(transaction: Transaction, when: date) -> None:
    transaction.transaction_date = when
    transaction.transaction_month = when.month
    transaction.transaction_year = when.year


def amount_from_units(amount_per_unit: Optional[int], quantity) -> Optional[int]:
    if amount_per_unit is None or quantity is None:
        return None
    return money.round_half_up(Decimal(amount_per_unit) * Decimal(str(quantity)))


async def build_transaction(
    db: AsyncSession,
    vessel_id: int,
    *,
    type: str,
    category_id: int,
    amount: int,
    transaction_date: date,
    created_by: Optional[int] = None,
    vat_profile_id: Optional[int] = None,
    amount_includes_vat: bool = False,
    currency: Optional[str] = None,
    house_of_zeros: Optional[int] = None,
    status: str = STATUS_COMPLETED,
    **fields,
) -> Transaction:
    """New transaction with number, reference, VAT and currency resolved; added to the session"""
    transaction = Transaction(
        vessel_id=vessel_id,
        type=type,
        category_id=category_id,
        status=status,
        created_by=created_by,
        currency=(currency or await vessel_settings.default_currency(db, vessel_id)).upper(),
        house_of_zeros=house_of_zeros if house_of_zeros is not None else settings.DEFAULT_HOUSE_OF_ZEROS,
        **fields,
    )
    set_date(transaction, transaction_date)

    profile = await resolve_vat_profile(db, vessel_id, type, vat_profile_id)
    apply_amounts(transaction, amount, profile, amount_includes_vat)

    transaction.transaction_number = await numbering.next_transaction_number(db)
    transaction.reference = await numbering.next_reference(db)
    db.add(transaction)
    await db.flush()
    return transaction
