import os
from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Settings are read at import time
os.environ["DATABASE_URI"] = "sqlite:///:memory:"
os.environ["LOG_TO_FILE"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["RECURRING_ENABLED"] = "false"


@pytest_asyncio.fixture
async def test_engine():
    """Fresh database per test"""
    import vesselbook.models  # noqa: F401
    from vesselbook.db.base import Base

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    from vesselbook.db.init_db import seed_defaults

    async_session_maker = sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    async with async_session_maker() as session:
        await seed_defaults(session)
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test session; lifespan is not run by ASGITransport"""
    from vesselbook.core.deps import get_db
    from vesselbook.main import app

    async def get_db_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_db] = get_db_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: AsyncSession):
    from vesselbook.models import User

    async def _make(name: str, email: str, user_type: str = "account", vessel_id: int = None):
        user = User(name=name, email=email, user_type=user_type, vessel_id=vessel_id, status="active")
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user("Joaquim Ferreira", "joaquim@fleet.pt")


@pytest.fixture
def headers(owner):
    return {"X-User-Id": str(owner.id)}


@pytest_asyncio.fixture
async def vessel(client: AsyncClient, headers) -> dict:
    response = await client.post(
        "/api/v1/vessels/",
        json={"name": "Mar Azul", "registration_number": "PT-AV-1234", "country_code": "pt"},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def vessel_url(vessel) -> str:
    return f"/api/v1/vessels/{vessel['id']}"


@pytest_asyncio.fixture
async def categories(session: AsyncSession) -> dict:
    """Global category name -> id"""
    from vesselbook.models import TransactionCategory

    result = await session.execute(select(TransactionCategory.name, TransactionCategory.id))
    return dict(result.all())


@pytest.fixture
def create_transaction(client: AsyncClient, headers, vessel_url, categories):
    async def _create(type: str = "income", amount: int = 10000, category: str = None, **fields) -> dict:
        if category is None:
            category = "Fretamento" if type == "income" else "Combustível"
        payload = {
            "type": type,
            "category_id": categories[category],
            "amount": amount,
            "transaction_date": str(fields.pop("transaction_date", date.today())),
            **fields,
        }
        response = await client.post(f"{vessel_url}/transactions/", json=payload, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()

    return _create
