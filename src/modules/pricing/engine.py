"""Pricing engine: composes rule multipliers into an order price.

The engine is a pure read-side component.  Given an order's draft
attributes it performs at most six independent point look-ups against the
injected rule store and multiplies left to right::

    price = rate_per_page * page_count
            * education_level * task_type * urgency * complexity
            [* citation_style, unless "none"]

A missing or inactive rule contributes 1.0.  The result is rounded to
cents with ROUND_HALF_UP.  Nothing is persisted, so repeated calls with
the same catalog and attributes return the same quote.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, List, Optional, Protocol

import structlog
from django.conf import settings

from modules.pricing.constants import (
    BASE_PRICE_RULE_NAME,
    CURRENCY,
    MULTIPLIER_SEQUENCE,
    RuleCategory,
)

if TYPE_CHECKING:
    from modules.pricing.repositories.interfaces import IPricingRuleRepository

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")
NEUTRAL_MULTIPLIER = Decimal("1")


class PricedAttributes(Protocol):
    """Order attributes the engine reads (DTOs and ``Order`` both qualify)."""

    education_level: str
    task_type: str
    page_count: int
    urgency: Optional[str]
    complexity_level: Optional[str]
    citation_style: Optional[str]


@dataclass(frozen=True)
class AppliedMultiplier:
    category: str
    applies_to: str
    multiplier: Decimal
    rule_name: Optional[str] = None


@dataclass(frozen=True)
class PriceQuote:
    """Result of a price computation.

    ``base_price`` is the pre-multiplier amount (rate x pages);
    ``total_price`` is the rounded final price.
    """

    base_price: Decimal
    total_price: Decimal
    rate_per_page: Decimal
    page_count: int
    urgency: str
    currency: str = CURRENCY
    applied: List[AppliedMultiplier] = field(default_factory=list)


def round_price(amount: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class PricingEngine:
    """Computes prices from an ``IPricingRuleRepository``.

    The engine never validates identity or roles and never writes.
    """

    def __init__(
        self,
        rule_repository: IPricingRuleRepository,
        default_rate_per_page: Optional[Decimal] = None,
    ) -> None:
        self._rules = rule_repository
        self._default_rate = default_rate_per_page

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compute_price(self, attrs: PricedAttributes) -> PriceQuote:
        page_count = attrs.page_count or 1
        rate = self.rate_per_page()
        base = rate * page_count
        urgency = attrs.urgency or "standard"

        selectors = {
            RuleCategory.EDUCATION_LEVEL: attrs.education_level,
            RuleCategory.TASK_TYPE: attrs.task_type,
            RuleCategory.URGENCY: urgency,
            RuleCategory.COMPLEXITY: attrs.complexity_level or "standard",
            RuleCategory.CITATION_STYLE: attrs.citation_style,
        }

        total = base
        applied: List[AppliedMultiplier] = []
        for category in MULTIPLIER_SEQUENCE:
            value = selectors[category]
            if category == RuleCategory.CITATION_STYLE and (
                not value or value == "none"
            ):
                continue
            step = self._multiplier_for(category, value)
            total *= step.multiplier
            applied.append(step)

        quote = PriceQuote(
            base_price=round_price(base),
            total_price=round_price(total),
            rate_per_page=rate,
            page_count=page_count,
            urgency=urgency,
            applied=applied,
        )
        logger.debug(
            "pricing.price_computed",
            total_price=str(quote.total_price),
            page_count=page_count,
            urgency=urgency,
        )
        return quote

    def rate_per_page(self) -> Decimal:
        """Per-page rate: the active base-rate rule, else the configured default."""
        rule = self._rules.get_active_rule_by_name(BASE_PRICE_RULE_NAME)
        if rule is not None and rule.base_price:
            return Decimal(rule.base_price)
        return self._fallback_rate()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fallback_rate(self) -> Decimal:
        if self._default_rate is not None:
            return Decimal(self._default_rate)
        return Decimal(settings.PRICING_DEFAULT_BASE_PRICE_PER_PAGE)

    def _multiplier_for(self, category: str, value: str) -> AppliedMultiplier:
        rule = self._rules.find_active_rule(category, value) if value else None
        if rule is None:
            return AppliedMultiplier(
                category=str(category),
                applies_to=value or "",
                multiplier=NEUTRAL_MULTIPLIER,
            )
        return AppliedMultiplier(
            category=str(category),
            applies_to=value,
            multiplier=Decimal(rule.multiplier),
            rule_name=rule.name,
        )
