"""Unit tests for loan entity state transitions (State Pattern)."""

from datetime import datetime, timedelta, timezone

import pytest

from ecomove.domain.entities import Loan
from ecomove.domain.enums import LoanStatus
from ecomove.domain.exceptions import ConflictError, InvalidTransitionError

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _loan(**overrides) -> Loan:
    loan = Loan.create(id="loan-1", user_id="user-1", transport_id="bike-1", start_date=T0)
    return Loan(**{**loan.to_record(), **overrides})


class TestLoanFactory:
    def test_create_forces_initial_state(self):
        loan = Loan.create(id="loan-1", user_id="user-1", transport_id="bike-1", start_date=T0)
        assert loan.status == LoanStatus.ACTIVE
        assert loan.end_date is None
        assert loan.cost == 0
        assert (loan.id, loan.user_id, loan.transport_id, loan.start_date) == (
            "loan-1", "user-1", "bike-1", T0,
        )

    def test_create_rejects_extra_state_fields(self):
        with pytest.raises(TypeError):
            Loan.create(
                id="loan-1", user_id="u", transport_id="t", start_date=T0,
                status=LoanStatus.COMPLETED,
            )

    def test_loan_is_immutable(self):
        loan = _loan()
        with pytest.raises(AttributeError):
            loan.status = LoanStatus.CANCELLED


class TestPredicates:
    def test_active_loan_allows_every_transition(self):
        loan = _loan()
        assert loan.can_be_completed()
        assert loan.can_be_cancelled()
        assert loan.can_be_extended()
        assert loan.is_active()
        assert not loan.is_completed()
        assert not loan.is_cancelled()

    @pytest.mark.parametrize("status", [LoanStatus.COMPLETED, LoanStatus.CANCELLED])
    def test_terminal_states_allow_nothing(self, status):
        loan = _loan(status=status)
        assert not loan.can_be_completed()
        assert not loan.can_be_cancelled()
        assert not loan.can_be_extended()

    def test_status_queries(self):
        assert _loan(status=LoanStatus.COMPLETED).is_completed()
        assert _loan(status=LoanStatus.CANCELLED).is_cancelled()


class TestLoanStateMachine:
    # ── Valid transitions ─────────────────────────────────────────

    def test_active_to_completed(self):
        loan = _loan()
        end = T0 + timedelta(minutes=30)
        done = loan.complete(end)
        assert done.status == LoanStatus.COMPLETED
        assert done.end_date == end
        assert (done.id, done.user_id, done.transport_id, done.start_date) == (
            loan.id, loan.user_id, loan.transport_id, loan.start_date,
        )

    def test_complete_does_not_price(self):
        done = _loan().complete(T0 + timedelta(minutes=30))
        assert done.cost == 0

    def test_transition_leaves_original_untouched(self):
        loan = _loan()
        loan.complete(T0 + timedelta(minutes=5))
        assert loan.status == LoanStatus.ACTIVE
        assert loan.end_date is None

    def test_active_to_cancelled(self):
        cancelled = _loan(cost=1.25).cancel()
        assert cancelled.status == LoanStatus.CANCELLED
        assert cancelled.end_date is None
        assert cancelled.cost == 1.25

    def test_extend_keeps_loan_active(self):
        new_end = T0 + timedelta(hours=2)
        extended = _loan().extend(new_end)
        assert extended.status == LoanStatus.ACTIVE
        assert extended.end_date == new_end

    def test_extended_loan_can_still_complete(self):
        loan = _loan().extend(T0 + timedelta(hours=1))
        done = loan.complete(T0 + timedelta(minutes=70))
        assert done.end_date == T0 + timedelta(minutes=70)

    def test_with_cost_is_unconditional(self):
        for status in LoanStatus:
            assert _loan(status=status).with_cost(4.2).cost == 4.2

    # ── Invalid transitions ───────────────────────────────────────

    def test_completing_twice_fails(self):
        done = _loan().complete(T0 + timedelta(minutes=10))
        with pytest.raises(InvalidTransitionError, match="Loan cannot be completed"):
            done.complete(T0 + timedelta(minutes=20))

    def test_cancelling_twice_fails(self):
        cancelled = _loan().cancel()
        with pytest.raises(InvalidTransitionError, match="Loan cannot be cancelled"):
            cancelled.cancel()

    def test_completed_cannot_be_cancelled(self):
        done = _loan().complete(T0)
        with pytest.raises(InvalidTransitionError):
            done.cancel()

    def test_cancelled_cannot_be_completed_or_extended(self):
        cancelled = _loan().cancel()
        with pytest.raises(InvalidTransitionError):
            cancelled.complete(T0)
        with pytest.raises(InvalidTransitionError, match="Loan cannot be extended"):
            cancelled.extend(T0 + timedelta(hours=1))

    def test_invalid_transition_is_a_conflict(self):
        with pytest.raises(ConflictError):
            _loan(status=LoanStatus.COMPLETED).extend(T0)
