"""
User endpoints
==============

GET /api/v1/users/{user_id}/loans   -- the user's loan history, newest first

Users themselves are opaque ids; only their loans are served here.
"""

from fastapi import APIRouter, Depends, Query, Request

from ecomove.api.dependencies import get_loan_service
from ecomove.api.middleware import limiter
from ecomove.api.routes.loans import loan_response
from ecomove.api.schemas import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, LoanResponse
from ecomove.config import settings
from ecomove.services.loans import LoanService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/{user_id}/loans",
    response_model=list[LoanResponse],
    summary="Loan history of a user",
)
@limiter.limit(settings.rate_limit)
async def user_loans(
    request: Request,
    user_id: str,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    service: LoanService = Depends(get_loan_service),
):
    loans = await service.user_history(user_id, limit=limit, offset=offset)
    return [loan_response(loan, service) for loan in loans]
