"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    order_number: str = ""
    requester_id: str = ""
    total_price: str = "0.00"
    urgency: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order status changes."""

    old_status: str = ""
    new_status: str = ""
    changed_by: Optional[str] = None


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    reason: str = ""
    cancelled_by: Optional[str] = None


@dataclass(frozen=True)
class OrderReviewed(DomainEvent):
    """Raised when the requester rates a completed order."""

    rating: int = 0
