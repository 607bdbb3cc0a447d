"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Loan``: enforces valid lifecycle transitions
  (ACTIVE -> COMPLETED | CANCELLED, plus ACTIVE -> ACTIVE on extension).
- ``Loan`` is an immutable value: every transition returns a new instance
  and leaves the original untouched, so snapshots can be shared freely
  between threads.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional

from .enums import LOAN_TRANSITIONS, LoanAction, LoanStatus
from .exceptions import InvalidTransitionError
from .records import parse_loan_record


@dataclass(frozen=True)
class Loan:
    id: str
    user_id: str
    transport_id: str
    start_date: datetime
    end_date: Optional[datetime] = None
    cost: float = 0.0
    status: LoanStatus = LoanStatus.ACTIVE

    # ── Factory ───────────────────────────────────────────────────────

    @classmethod
    def create(
        cls, id: str, user_id: str, transport_id: str, start_date: datetime
    ) -> Loan:
        """New loan: always ACTIVE, no end date, zero cost."""
        return cls(
            id=id,
            user_id=user_id,
            transport_id=transport_id,
            start_date=start_date,
            end_date=None,
            cost=0.0,
            status=LoanStatus.ACTIVE,
        )

    @classmethod
    def from_record(cls, raw: Mapping[str, Any]) -> Loan:
        """Rehydrate a persisted loan; raises ``LoanRecordError`` if malformed."""
        record = parse_loan_record(raw)
        return cls(
            id=record.id,
            user_id=record.user_id,
            transport_id=record.transport_id,
            start_date=record.start_date,
            end_date=record.end_date,
            cost=record.cost,
            status=record.status,
        )

    def to_record(self) -> dict[str, Any]:
        return asdict(self)

    # ── Predicates ────────────────────────────────────────────────────

    def _allows(self, action: LoanAction) -> bool:
        return action in LOAN_TRANSITIONS.get(self.status, frozenset())

    def can_be_completed(self) -> bool:
        return self._allows(LoanAction.COMPLETE)

    def can_be_cancelled(self) -> bool:
        return self._allows(LoanAction.CANCEL)

    def can_be_extended(self) -> bool:
        return self._allows(LoanAction.EXTEND)

    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE

    def is_completed(self) -> bool:
        return self.status == LoanStatus.COMPLETED

    def is_cancelled(self) -> bool:
        return self.status == LoanStatus.CANCELLED

    # ── Transitions ───────────────────────────────────────────────────

    def complete(self, end_date: datetime) -> Loan:
        """Close the loan at *end_date*.  Cost is priced separately."""
        if not self.can_be_completed():
            raise InvalidTransitionError("Loan cannot be completed")
        return replace(self, status=LoanStatus.COMPLETED, end_date=end_date)

    def cancel(self) -> Loan:
        if not self.can_be_cancelled():
            raise InvalidTransitionError("Loan cannot be cancelled")
        return replace(self, status=LoanStatus.CANCELLED)

    def extend(self, new_end_date: datetime) -> Loan:
        """Move the planned return time; the loan stays ACTIVE."""
        if not self.can_be_extended():
            raise InvalidTransitionError("Loan cannot be extended")
        return replace(self, end_date=new_end_date)

    def with_cost(self, cost: float) -> Loan:
        return replace(self, cost=cost)
