"""Domain-specific exceptions"""


class DomainError(Exception):
    """Base exception for the loan domain"""


class ConflictError(DomainError):
    """The requested operation conflicts with the current state"""


class InvalidTransitionError(ConflictError):
    """Raised when a loan status change violates the state machine."""


class NotFoundError(DomainError):
    """A referenced loan or transport does not exist"""


class LoanRecordError(DomainError):
    """A persisted loan record is malformed and cannot be rehydrated"""


class ConfigurationError(DomainError):
    """Pricing configuration is invalid or incomplete"""
