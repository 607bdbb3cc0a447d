"""
Loan Service
============

Glue between persistence and the pure loan domain.

Per request
-----------
1. Load the current loan snapshot with a row lock.
2. Apply the domain transition (raises ``InvalidTransitionError``).
3. Price the result where the transition calls for it.
4. Write the new snapshot back and release or reserve the vehicle.

Pricing on completion
---------------------
* regular cost for the actual duration, plus
* when the loan carried a planned end date (after an extension) and came
  back later than that, the overdue penalty for the whole minutes past it.

Return and planned end dates earlier than the loan start are rejected with
``ConflictError`` before anything is priced or written.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from ecomove.domain.clock import Clock
from ecomove.domain.durations import duration_in_minutes, minutes_between
from ecomove.domain.entities import Loan
from ecomove.domain.enums import LoanStatus
from ecomove.domain.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
)
from ecomove.domain.pricing import OverdueCostRequest, PricingEngine, PricingRule
from ecomove.infrastructure.repositories import LoanRepository, TransportRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FareQuote:
    transport_type: str
    duration_minutes: int
    rule: PricingRule
    cost: float
    late_fee: float


def quote_fare(
    pricing: PricingEngine, transport_type: str, duration_minutes: int
) -> FareQuote:
    """Regular cost and late fee for a hypothetical rental."""
    return FareQuote(
        transport_type=transport_type,
        duration_minutes=duration_minutes,
        rule=pricing.get_base_pricing(transport_type),
        cost=pricing.calculate_loan_cost(duration_minutes, transport_type),
        late_fee=pricing.calculate_late_fee(duration_minutes, transport_type),
    )


class LoanService:
    def __init__(
        self,
        loans: LoanRepository,
        transports: TransportRepository,
        pricing: PricingEngine,
        clock: Clock,
    ):
        self.loans = loans
        self.transports = transports
        self.pricing = pricing
        self.clock = clock

    # ── Queries ───────────────────────────────────────────────────────

    async def get_loan(self, loan_id: str) -> Loan:
        loan = await self.loans.get_by_id(loan_id)
        if loan is None:
            raise NotFoundError("Loan not found")
        return loan

    async def list_loans(
        self, status: Optional[LoanStatus] = None, *, limit: int = 50, offset: int = 0
    ) -> list[Loan]:
        """Loans in *status* (all loans when ``None``), newest first."""
        return await self.loans.find_by_status(status, limit=limit, offset=offset)

    async def user_history(
        self, user_id: str, *, limit: int = 50, offset: int = 0
    ) -> list[Loan]:
        return await self.loans.find_by_user(user_id, limit=limit, offset=offset)

    def current_duration(self, loan: Loan) -> Optional[int]:
        # An extended loan's end_date is only planned until completion.
        end_date = None if loan.is_active() else loan.end_date
        return duration_in_minutes(
            loan.start_date, end_date, loan.is_active(), clock=self.clock
        )

    # ── Commands ──────────────────────────────────────────────────────

    async def start_loan(self, user_id: str, transport_id: str) -> Loan:
        transport = await self.transports.get_for_update(transport_id)
        if transport is None:
            raise NotFoundError("Transport not found")
        if not transport.is_available:
            raise ConflictError("Transport is not available")
        if await self.loans.has_active_loan(user_id):
            raise ConflictError("User already has an active loan")

        loan = Loan.create(
            id=str(uuid.uuid4()),
            user_id=user_id,
            transport_id=transport_id,
            start_date=self.clock.now(),
        )
        try:
            await self.loans.add(loan)
        except IntegrityError as exc:
            # A concurrent start for the same user won the partial unique index
            logger.warning("Rejected second active loan for user %s", user_id)
            raise ConflictError("User already has an active loan") from exc
        await self.transports.set_available(transport_id, False)
        logger.info(
            "Loan %s started (user=%s, transport=%s)", loan.id, user_id, transport_id
        )
        return loan

    async def complete_loan(
        self, loan_id: str, end_date: Optional[datetime] = None
    ) -> Loan:
        loan = await self._locked(loan_id)
        returned_at = end_date or self.clock.now()
        planned_end = loan.end_date

        try:
            completed = loan.complete(returned_at)
        except InvalidTransitionError:
            logger.warning("Rejected completion of loan %s (%s)", loan_id, loan.status.value)
            raise
        self._check_not_before_start(loan, returned_at)

        transport_type = await self._transport_type(loan.transport_id)
        actual = minutes_between(loan.start_date, returned_at)
        cost = self.pricing.calculate_loan_cost(actual, transport_type)

        if planned_end is not None and returned_at > planned_end:
            overdue = self.pricing.calculate_overdue_cost(
                OverdueCostRequest(
                    transport_type=transport_type,
                    planned_duration_minutes=minutes_between(loan.start_date, planned_end),
                    actual_duration_minutes=actual,
                    overdue_minutes=minutes_between(planned_end, returned_at),
                )
            )
            cost += overdue.total_cost

        completed = completed.with_cost(cost)
        await self.loans.save(completed)
        await self.transports.set_available(loan.transport_id, True)
        logger.info(
            "Loan %s completed after %d min, cost %.2f", loan_id, actual, cost
        )
        return completed

    async def cancel_loan(self, loan_id: str) -> Loan:
        loan = await self._locked(loan_id)
        try:
            cancelled = loan.cancel()
        except InvalidTransitionError:
            logger.warning("Rejected cancellation of loan %s (%s)", loan_id, loan.status.value)
            raise

        await self.loans.save(cancelled)
        await self.transports.set_available(loan.transport_id, True)
        logger.info("Loan %s cancelled", loan_id)
        return cancelled

    async def extend_loan(self, loan_id: str, new_end_date: datetime) -> Loan:
        loan = await self._locked(loan_id)
        try:
            extended = loan.extend(new_end_date)
        except InvalidTransitionError:
            logger.warning("Rejected extension of loan %s (%s)", loan_id, loan.status.value)
            raise
        self._check_not_before_start(loan, new_end_date)

        # Provisional cost for the planned duration
        transport_type = await self._transport_type(loan.transport_id)
        planned = minutes_between(loan.start_date, new_end_date)
        extended = extended.with_cost(
            self.pricing.calculate_loan_cost(planned, transport_type)
        )
        await self.loans.save(extended)
        logger.info("Loan %s extended until %s", loan_id, new_end_date.isoformat())
        return extended

    # ── Internals ─────────────────────────────────────────────────────

    async def _locked(self, loan_id: str) -> Loan:
        loan = await self.loans.get_for_update(loan_id)
        if loan is None:
            raise NotFoundError("Loan not found")
        return loan

    @staticmethod
    def _check_not_before_start(loan: Loan, end_date: datetime) -> None:
        if end_date < loan.start_date:
            logger.warning(
                "Rejected end date %s before start of loan %s",
                end_date.isoformat(),
                loan.id,
            )
            raise ConflictError("End date cannot be before the loan start")

    async def _transport_type(self, transport_id: str) -> str:
        transport = await self.transports.get_by_id(transport_id)
        if transport is None:
            # Unknown vehicles are priced with the default rule
            return "default"
        return transport.transport_type.value
