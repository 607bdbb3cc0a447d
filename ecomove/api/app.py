"""
FastAPI application factory.

* Registers routes for loans, user loan history, pricing and admin.
* Maps domain errors to HTTP: ``ConflictError`` -> 409, ``NotFoundError`` -> 404,
  ``LoanRecordError`` -> 500 with a JSON detail.
* Applies rate-limiting.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ecomove.api.middleware import (
    conflict_handler,
    limiter,
    loan_record_handler,
    not_found_handler,
)
from ecomove.api.routes import admin, loans, pricing, users
from ecomove.config import settings
from ecomove.domain.exceptions import ConflictError, LoanRecordError, NotFoundError

logging.basicConfig(level=settings.log_level)


def create_app() -> FastAPI:
    app = FastAPI(
        title="EcoMove Loans API",
        description=(
            "Bike and scooter rentals: starts, completes, cancels and "
            "extends loans, and prices them per vehicle type with an "
            "overdue penalty regime."
        ),
        version="1.0.0",
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(LoanRecordError, loan_record_handler)

    # Routers
    app.include_router(loans.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(pricing.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
