"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  ``SELECT ... FOR UPDATE`` is a no-op on SQLite,
which is fine for single-session tests.  Time is pinned with a
``FixedClock`` so durations are deterministic.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ecomove.domain.clock import FixedClock
from ecomove.domain.enums import TransportType
from ecomove.domain.pricing import PricingEngine
from ecomove.infrastructure.database import Base
from ecomove.infrastructure import models  # noqa: F401  (registers tables)
from ecomove.infrastructure.models import TransportModel
from ecomove.infrastructure.repositories import LoanRepository, TransportRepository
from ecomove.services.loans import LoanService

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

BICYCLE_ID = "bike-0001"
SCOOTER_ID = "scoot-0001"
E_SCOOTER_ID = "escoot-0001"


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh schema with three transports; dropped afterwards."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                TransportModel(id=BICYCLE_ID, code="BIC-1", transport_type=TransportType.BICYCLE),
                TransportModel(id=SCOOTER_ID, code="SCO-1", transport_type=TransportType.SCOOTER),
                TransportModel(
                    id=E_SCOOTER_ID, code="ESC-1", transport_type=TransportType.ELECTRIC_SCOOTER
                ),
            ]
        )
        await session.commit()

    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def service(db_session, clock) -> LoanService:
    return LoanService(
        LoanRepository(db_session),
        TransportRepository(db_session),
        PricingEngine(),
        clock,
    )
