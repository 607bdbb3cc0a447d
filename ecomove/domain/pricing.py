"""
Loan Pricing Engine  (Strategy Pattern)
=======================================

Formulas
--------
Regular cost   = Base_Rate + Minutes x Per_Minute_Rate
Late fee       = 0.5 x Regular cost                      (added on top)
Overdue cost   = Overdue_Minutes x (Per_Minute_Rate x 2)

* Rules are looked up by exact vehicle-type key, falling back to the
  ``default`` rule for anything unrecognised.
* No clamping and no rounding: zero or negative durations simply give a
  correspondingly small or negative amount.  Rounding for display is the
  caller's business (see ``round_amount``, applied by the API responses).

Complexity: O(1) per calculation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from .exceptions import ConfigurationError

DEFAULT_RULE_KEY = "default"
LATE_FEE_RATIO = 0.5
OVERDUE_RATE_MULTIPLIER = 2


@dataclass(frozen=True)
class PricingRule:
    base_rate: float
    per_minute_rate: float
    currency: str = "USD"


DEFAULT_PRICING_RULES: dict[str, PricingRule] = {
    "bicycle": PricingRule(base_rate=1.0, per_minute_rate=0.1),
    "scooter": PricingRule(base_rate=2.0, per_minute_rate=0.15),
    "electric_scooter": PricingRule(base_rate=3.0, per_minute_rate=0.25),
    DEFAULT_RULE_KEY: PricingRule(base_rate=1.5, per_minute_rate=0.12),
}


@dataclass(frozen=True)
class OverdueCostRequest:
    transport_type: str
    planned_duration_minutes: float
    actual_duration_minutes: float
    overdue_minutes: float


@dataclass(frozen=True)
class OverdueCost:
    total_cost: float


# ── Strategy hierarchy ────────────────────────────────────────────────


class PricingStrategy(ABC):
    @abstractmethod
    def calculate(self, minutes: float, rule: PricingRule) -> float: ...


class StandardPricing(PricingStrategy):
    def calculate(self, minutes: float, rule: PricingRule) -> float:
        return rule.base_rate + minutes * rule.per_minute_rate


class LateFeePricing(PricingStrategy):
    """A surcharge proportional to the regular cost of the same duration."""

    def __init__(self, ratio: float = LATE_FEE_RATIO):
        self.ratio = ratio

    def calculate(self, minutes: float, rule: PricingRule) -> float:
        return StandardPricing().calculate(minutes, rule) * self.ratio


class OverduePenaltyPricing(PricingStrategy):
    """Overdue minutes at a multiple of the per-minute rate, no base charge."""

    def __init__(self, multiplier: float = OVERDUE_RATE_MULTIPLIER):
        self.multiplier = multiplier

    def calculate(self, minutes: float, rule: PricingRule) -> float:
        return minutes * (rule.per_minute_rate * self.multiplier)


# ── Engine facade ─────────────────────────────────────────────────────


class PricingEngine:
    """High-level API used by the loan service and the pricing endpoints."""

    def __init__(self, rules: Mapping[str, PricingRule] = DEFAULT_PRICING_RULES):
        if DEFAULT_RULE_KEY not in rules:
            raise ConfigurationError(
                f"Pricing rules must define a '{DEFAULT_RULE_KEY}' entry"
            )
        self.rules = dict(rules)

    def get_base_pricing(self, transport_type: str) -> PricingRule:
        return self.rules.get(transport_type, self.rules[DEFAULT_RULE_KEY])

    def calculate_loan_cost(self, duration_minutes: float, transport_type: str) -> float:
        rule = self.get_base_pricing(transport_type)
        return StandardPricing().calculate(duration_minutes, rule)

    def calculate_late_fee(self, duration_minutes: float, transport_type: str) -> float:
        rule = self.get_base_pricing(transport_type)
        return LateFeePricing().calculate(duration_minutes, rule)

    def calculate_overdue_cost(self, request: OverdueCostRequest) -> OverdueCost:
        # planned/actual durations are carried for context only; the
        # penalty depends on overdue minutes alone.
        rule = self.get_base_pricing(request.transport_type)
        total = OverduePenaltyPricing().calculate(request.overdue_minutes, rule)
        return OverdueCost(total_cost=total)


def round_amount(value: float) -> float:
    """Round a monetary amount to cents, half-up."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
