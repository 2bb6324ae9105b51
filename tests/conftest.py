"""Pytest fixtures.

Every test gets its own SQLite file (file-backed so all sessions of the async
engine share state) and a service container with a fixed clock.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.core.clock import fixed_clock
from app.database import init_db
from app.schemas.transaction import Transaction, TransactionType
from app.services import build_services

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def session_maker(anyio_backend, tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def services(session_maker):
    return build_services(session_maker, clock=fixed_clock(NOW))


@pytest.fixture
async def categories(services):
    """Default categories of USER_ID keyed by name."""
    created = await services.categories.initialize_default_categories(USER_ID)
    return {c.name: c for c in created}


def make_transaction(
    amount: str,
    type: TransactionType,
    category_id: str,
    date: datetime,
    category_name: str | None = None,
    id: str | None = None,
) -> Transaction:
    """Build an in-memory transaction record."""
    return Transaction(
        id=id,
        user_id=USER_ID,
        amount=Decimal(amount),
        type=type,
        category_id=category_id,
        category_name=category_name or category_id,
        date=date,
        created_at=date,
        updated_at=date,
    )
