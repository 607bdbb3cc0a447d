"""
Pricing endpoints
=================

GET  /api/v1/pricing/{transport_type} -- resolved pricing rule
POST /api/v1/pricing/quote            -- regular cost and late fee for a duration

Durations are capped at 24 h here; the pricing engine itself accepts any
number of minutes.  Amounts are rounded to cents on the way out.
"""

from fastapi import APIRouter, Depends, Request

from ecomove.api.dependencies import get_pricing_engine
from ecomove.api.middleware import limiter
from ecomove.api.schemas import PricingRuleResponse, QuoteRequest, QuoteResponse
from ecomove.config import settings
from ecomove.domain.pricing import PricingEngine, round_amount
from ecomove.services.loans import quote_fare

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/quote", response_model=QuoteResponse, summary="Quote a rental")
@limiter.limit(settings.rate_limit)
async def quote(
    request: Request,
    body: QuoteRequest,
    pricing: PricingEngine = Depends(get_pricing_engine),
):
    fare = quote_fare(pricing, body.transport_type, body.duration_minutes)
    return QuoteResponse(
        transport_type=fare.transport_type,
        duration_minutes=fare.duration_minutes,
        base_rate=fare.rule.base_rate,
        per_minute_rate=fare.rule.per_minute_rate,
        currency=fare.rule.currency,
        cost=round_amount(fare.cost),
        late_fee=round_amount(fare.late_fee),
    )


@router.get(
    "/{transport_type}",
    response_model=PricingRuleResponse,
    summary="Pricing rule for a transport type",
)
@limiter.limit(settings.rate_limit)
async def get_pricing(
    request: Request,
    transport_type: str,
    pricing: PricingEngine = Depends(get_pricing_engine),
):
    rule = pricing.get_base_pricing(transport_type)
    return PricingRuleResponse(
        transport_type=transport_type,
        base_rate=rule.base_rate,
        per_minute_rate=rule.per_minute_rate,
        currency=rule.currency,
    )
