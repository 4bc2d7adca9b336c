import asyncio
import logging
from decimal import Decimal
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.db.session import engine, SessionLocal
from vesselbook.db.base import Base
from vesselbook.core.permissions import ROLE_NAMES, granted
from vesselbook.models import VesselRoleAccess, TransactionCategory, VatProfile

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS = {
    "normal": "Read-only access to the vessel",
    "moderator": "Edits day to day records",
    "supervisor": "Manages the vessel except destructive actions",
    "administrator": "Full access to the vessel",
}

# (name, type, color)
DEFAULT_CATEGORIES = [
    ("Fretamento", "income", "#16a34a"),
    ("Serviços", "income", "#22c55e"),
    ("Outras Receitas", "income", "#4ade80"),
    ("Combustível", "expense", "#dc2626"),
    ("Manutenção", "expense", "#ea580c"),
    ("Salários", "expense", "#d97706"),
    ("Seguros", "expense", "#ca8a04"),
    ("Taxas e Licenças", "expense", "#9333ea"),
    ("Alimentação", "expense", "#db2777"),
    ("Docagem", "expense", "#2563eb"),
    ("Outras Despesas", "expense", "#6b7280"),
]

SALARY_CATEGORY = "Salários"

# (country, name, code, percentage, is_default)
DEFAULT_VAT_PROFILES = [
    ("PT", "IVA Normal", "IVA", "23.00", True),
    ("ES", "IVA General", "IVA", "21.00", False),
    ("FR", "TVA Standard", "TVA", "20.00", False),
    ("AO", "IVA Angolano", "IVA", "14.00", False),
    ("BR", "ICMS Standard", "ICMS", "0.00", False),
    (None, "Isento", "ISENTO", "0.00", False),
]


async def ensure_tables_exist() -> None:
    """Create any missing table (called at startup)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_defaults(db: AsyncSession) -> dict:
    """
    Insert role accesses, global categories and VAT profiles

    Safe to run repeatedly: existing rows are left alone.
    """
    created = {"roles": 0, "categories": 0, "vat_profiles": 0}

    existing_roles = set((await db.execute(select(VesselRoleAccess.name))).scalars().all())
    for name, display_name in ROLE_NAMES.items():
        if name in existing_roles:
            continue
        db.add(VesselRoleAccess(
            name=name,
            display_name=display_name,
            description=ROLE_DESCRIPTIONS[name],
            permissions=granted(display_name),
            is_active=True,
        ))
        created["roles"] += 1

    existing_categories = set(
        (await db.execute(
            select(TransactionCategory.name).where(TransactionCategory.vessel_id.is_(None))
        )).scalars().all()
    )
    for name, category_type, color in DEFAULT_CATEGORIES:
        if name in existing_categories:
            continue
        db.add(TransactionCategory(name=name, type=category_type, color=color, is_system=True))
        created["categories"] += 1

    existing_profiles = set(
        (await db.execute(select(VatProfile.country_code, VatProfile.code))).all()
    )
    for country, name, code, percentage, is_default in DEFAULT_VAT_PROFILES:
        if (country, code) in existing_profiles:
            continue
        db.add(VatProfile(
            country_code=country, name=name, code=code,
            percentage=Decimal(percentage), is_default=is_default, is_active=True,
        ))
        created["vat_profiles"] += 1

    await db.commit()
    return created


async def init_db() -> None:
    await ensure_tables_exist()
    async with SessionLocal() as db:
        result = await seed_defaults(db)
    logger.info(f"Seeded defaults: {result}")


if __name__ == "__main__":
    asyncio.run(init_db())
