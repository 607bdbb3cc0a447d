"""Rate limiting and domain-error translation."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from ecomove.domain.exceptions import ConflictError, LoanRecordError, NotFoundError

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def loan_record_handler(request: Request, exc: LoanRecordError) -> JSONResponse:
    # Stored row failed validation; the request itself was fine.
    logger.error("Unreadable loan record on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})
