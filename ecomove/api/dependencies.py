"""FastAPI dependency injection helpers."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ecomove.config import settings
from ecomove.domain.clock import Clock, SystemClock
from ecomove.domain.pricing import PricingEngine
from ecomove.infrastructure.database import async_session_factory
from ecomove.infrastructure.repositories import LoanRepository, TransportRepository
from ecomove.services.loans import LoanService


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_clock() -> Clock:
    return SystemClock()


@lru_cache
def get_pricing_engine() -> PricingEngine:
    return PricingEngine(settings.pricing_table())


def get_loan_service(
    db: AsyncSession = Depends(get_db),
    pricing: PricingEngine = Depends(get_pricing_engine),
    clock: Clock = Depends(get_clock),
) -> LoanService:
    return LoanService(LoanRepository(db), TransportRepository(db), pricing, clock)
