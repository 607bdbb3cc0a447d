"""
Loan endpoints
==============

POST  /api/v1/loans                 -- start a loan
GET   /api/v1/loans                 -- list loans, optionally by status (paged)
GET   /api/v1/loans/{loan_id}       -- loan snapshot with live duration
PATCH /api/v1/loans/{loan_id}/complete -- return the vehicle and price the loan
PATCH /api/v1/loans/{loan_id}/cancel   -- cancel an active loan
PATCH /api/v1/loans/{loan_id}/extend   -- move the planned return time

State-machine violations surface as 409 via the app's exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ecomove.api.dependencies import get_loan_service
from ecomove.api.middleware import limiter
from ecomove.api.schemas import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    LoanCompleteRequest,
    LoanCreateRequest,
    LoanExtendRequest,
    LoanResponse,
)
from ecomove.config import settings
from ecomove.domain.entities import Loan
from ecomove.domain.enums import LoanStatus
from ecomove.domain.pricing import round_amount
from ecomove.services.loans import LoanService

router = APIRouter(prefix="/loans", tags=["loans"])


def loan_response(loan: Loan, service: LoanService) -> LoanResponse:
    return LoanResponse(
        id=loan.id,
        user_id=loan.user_id,
        transport_id=loan.transport_id,
        start_date=loan.start_date,
        end_date=loan.end_date,
        cost=round_amount(loan.cost),
        status=loan.status.value,
        duration_minutes=service.current_duration(loan),
    )


@router.post(
    "",
    status_code=201,
    response_model=LoanResponse,
    summary="Start a loan",
    responses={409: {"description": "Vehicle unavailable or user busy."}},
)
@limiter.limit(settings.rate_limit)
async def create_loan(
    request: Request,
    body: LoanCreateRequest,
    service: LoanService = Depends(get_loan_service),
):
    loan = await service.start_loan(body.user_id, body.transport_id)
    return loan_response(loan, service)


@router.get(
    "/{loan_id}",
    response_model=LoanResponse,
    summary="Get loan status, duration and cost",
)
@limiter.limit(settings.rate_limit)
async def get_loan(
    request: Request,
    loan_id: str,
    service: LoanService = Depends(get_loan_service),
):
    loan = await service.get_loan(loan_id)
    return loan_response(loan, service)


@router.patch(
    "/{loan_id}/complete",
    response_model=LoanResponse,
    summary="Complete a loan",
    description=(
        "Closes an ACTIVE loan at the given return time (or now) and "
        "stores its cost, including any overdue penalty."
    ),
)
@limiter.limit(settings.rate_limit)
async def complete_loan(
    request: Request,
    loan_id: str,
    body: Optional[LoanCompleteRequest] = None,
    service: LoanService = Depends(get_loan_service),
):
    end_date = body.end_date if body else None
    loan = await service.complete_loan(loan_id, end_date)
    return loan_response(loan, service)


@router.patch(
    "/{loan_id}/cancel",
    response_model=LoanResponse,
    summary="Cancel a loan",
)
@limiter.limit(settings.rate_limit)
async def cancel_loan(
    request: Request,
    loan_id: str,
    service: LoanService = Depends(get_loan_service),
):
    loan = await service.cancel_loan(loan_id)
    return loan_response(loan, service)


@router.patch(
    "/{loan_id}/extend",
    response_model=LoanResponse,
    summary="Extend a loan",
)
@limiter.limit(settings.rate_limit)
async def extend_loan(
    request: Request,
    loan_id: str,
    body: LoanExtendRequest,
    service: LoanService = Depends(get_loan_service),
):
    loan = await service.extend_loan(loan_id, body.new_end_date)
    return loan_response(loan, service)


@router.get(
    "",
    response_model=list[LoanResponse],
    summary="List loans",
    description="Newest first; pass ``status=ACTIVE`` for the loans currently out.",
)
@limiter.limit(settings.rate_limit)
async def list_loans(
    request: Request,
    status: Optional[LoanStatus] = None,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    service: LoanService = Depends(get_loan_service),
):
    loans = await service.list_loans(status, limit=limit, offset=offset)
    return [loan_response(loan, service) for loan in loans]
