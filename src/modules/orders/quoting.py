"""Urgency derivation and price quotes for order attributes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from django.utils import timezone

from modules.orders.constants import RUSH_WITHIN_HOURS, URGENT_WITHIN_HOURS, Urgency

if TYPE_CHECKING:
    from modules.orders.dtos import PriceQuoteRequestDTO
    from modules.pricing.engine import PriceQuote, PricingEngine


def derive_urgency(deadline: datetime, now: datetime) -> str:
    """Urgency from the hours left until ``deadline``.

    ``<= 24h`` is urgent, ``<= 72h`` is rush, anything later is standard.
    """
    hours_left = (deadline - now).total_seconds() / 3600
    if hours_left <= URGENT_WITHIN_HOURS:
        return Urgency.URGENT
    if hours_left <= RUSH_WITHIN_HOURS:
        return Urgency.RUSH
    return Urgency.STANDARD


@dataclass(frozen=True)
class PricedOrderAttributes:
    education_level: str
    task_type: str
    page_count: int
    urgency: Optional[str]
    complexity_level: Optional[str]
    citation_style: Optional[str]


def quote_order(
    engine: PricingEngine,
    dto: PriceQuoteRequestDTO,
    now: Optional[datetime] = None,
) -> PriceQuote:
    """Price a draft order.

    When a deadline is given the urgency is derived from it and any
    caller-supplied urgency is ignored.
    """
    urgency = dto.urgency
    if dto.deadline is not None:
        urgency = derive_urgency(dto.deadline, now or timezone.now())

    return engine.compute_price(
        PricedOrderAttributes(
            education_level=dto.education_level,
            task_type=dto.task_type,
            page_count=dto.page_count,
            urgency=urgency,
            complexity_level=dto.complexity_level,
            citation_style=dto.citation_style,
        )
    )
