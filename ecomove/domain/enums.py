"""Domain enumerations and state-transition rules."""

import enum


class LoanStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class LoanAction(str, enum.Enum):
    COMPLETE = "complete"
    CANCEL = "cancel"
    EXTEND = "extend"


# State machine: maps current status -> set of actions it accepts.
# Each action is listed separately so the rules can diverge per action.
LOAN_TRANSITIONS: dict[LoanStatus, frozenset[LoanAction]] = {
    LoanStatus.ACTIVE: frozenset(
        {LoanAction.COMPLETE, LoanAction.CANCEL, LoanAction.EXTEND}
    ),
    LoanStatus.COMPLETED: frozenset(),
    LoanStatus.CANCELLED: frozenset(),
}


class TransportType(str, enum.Enum):
    BICYCLE = "bicycle"
    SCOOTER = "scooter"
    ELECTRIC_SCOOTER = "electric_scooter"
