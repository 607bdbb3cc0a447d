"""
Persisted loan record shape.

``LoanRecord`` is the flat, versioned structure the storage layer hands
back.  Parsing is strict: a record with an unparseable date or an unknown
status is rejected with ``LoanRecordError`` rather than turned into a
half-valid ``Loan``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .enums import LoanStatus
from .exceptions import LoanRecordError

RECORD_SCHEMA_VERSION = 1


class LoanRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    schema_version: Literal[1] = RECORD_SCHEMA_VERSION
    id: str
    user_id: str
    transport_id: str
    start_date: datetime
    end_date: Optional[datetime] = None
    cost: float = Field(0.0, ge=0)
    status: LoanStatus

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite and some drivers return naive datetimes
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def parse_loan_record(raw: Mapping[str, Any]) -> LoanRecord:
    """Validate *raw* against ``LoanRecord`` or raise ``LoanRecordError``."""
    try:
        return LoanRecord.model_validate(dict(raw))
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in exc.errors()
        )
        raise LoanRecordError(f"Malformed loan record ({fields})") from exc
