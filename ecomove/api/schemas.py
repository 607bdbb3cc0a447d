"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

MAX_LOAN_MINUTES = 1440  # 24 h
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ── Requests ──────────────────────────────────────────────────────────


class LoanCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    transport_id: str = Field(..., min_length=1, max_length=36)


class LoanCompleteRequest(BaseModel):
    end_date: Optional[datetime] = Field(
        None, description="Return time; defaults to now."
    )

    @field_validator("end_date")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class LoanExtendRequest(BaseModel):
    new_end_date: datetime

    @field_validator("new_end_date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class QuoteRequest(BaseModel):
    transport_type: str
    duration_minutes: int = Field(..., ge=1, le=MAX_LOAN_MINUTES)


# ── Responses ─────────────────────────────────────────────────────────


class LoanResponse(BaseModel):
    id: str
    user_id: str
    transport_id: str
    start_date: datetime
    end_date: Optional[datetime] = None
    cost: float
    status: str
    duration_minutes: Optional[int] = None

    model_config = {"from_attributes": True}


class PricingRuleResponse(BaseModel):
    transport_type: str
    base_rate: float
    per_minute_rate: float
    currency: str


class QuoteResponse(BaseModel):
    transport_type: str
    duration_minutes: int
    base_rate: float
    per_minute_rate: float
    currency: str
    cost: float
    late_fee: float


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
