"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work).  The loan
repository speaks in immutable ``Loan`` values: rows are rehydrated through
``Loan.from_record`` and written back field by field.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import LoanModel, TransportModel
from ecomove.domain.entities import Loan
from ecomove.domain.enums import LoanStatus, TransportType


class LoanRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, loan: Loan) -> Loan:
        self.session.add(LoanModel(**loan.to_record()))
        await self.session.flush()
        return loan

    async def get_by_id(self, loan_id: str) -> Optional[Loan]:
        row = await self.session.get(LoanModel, loan_id)
        return Loan.from_record(row.to_record()) if row else None

    async def get_for_update(self, loan_id: str) -> Optional[Loan]:
        """SELECT ... FOR UPDATE so concurrent transitions see one snapshot."""
        result = await self.session.execute(
            select(LoanModel).where(LoanModel.id == loan_id).with_for_update()
        )
        row = result.scalar_one_or_none()
        return Loan.from_record(row.to_record()) if row else None

    async def save(self, loan: Loan) -> Loan:
        row = await self.session.get(LoanModel, loan.id)
        if row is None:
            return await self.add(loan)
        row.end_date = loan.end_date
        row.cost = loan.cost
        row.status = loan.status
        await self.session.flush()
        return loan

    async def has_active_loan(self, user_id: str) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    LoanModel.user_id == user_id,
                    LoanModel.status == LoanStatus.ACTIVE,
                )
            )
        )
        return bool(result.scalar())

    async def find_by_status(
        self, status: Optional[LoanStatus], *, limit: int = 50, offset: int = 0
    ) -> list[Loan]:
        query = select(LoanModel)
        if status is not None:
            query = query.where(LoanModel.status == status)
        return await self._page(query, limit, offset)

    async def find_by_user(
        self, user_id: str, *, limit: int = 50, offset: int = 0
    ) -> list[Loan]:
        query = select(LoanModel).where(LoanModel.user_id == user_id)
        return await self._page(query, limit, offset)

    async def _page(self, query, limit: int, offset: int) -> list[Loan]:
        result = await self.session.execute(
            query.order_by(LoanModel.start_date.desc(), LoanModel.id)
            .limit(limit)
            .offset(offset)
        )
        return [Loan.from_record(row.to_record()) for row in result.scalars()]


class TransportRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self, *, id: str, code: str, transport_type: TransportType
    ) -> TransportModel:
        transport = TransportModel(
            id=id, code=code, transport_type=transport_type, is_available=True
        )
        self.session.add(transport)
        await self.session.flush()
        return transport

    async def get_by_id(self, transport_id: str) -> Optional[TransportModel]:
        return await self.session.get(TransportModel, transport_id)

    async def get_for_update(self, transport_id: str) -> Optional[TransportModel]:
        result = await self.session.execute(
            select(TransportModel)
            .where(TransportModel.id == transport_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def set_available(self, transport_id: str, available: bool) -> None:
        transport = await self.get_by_id(transport_id)
        if transport is not None:
            transport.is_available = available
            await self.session.flush()
