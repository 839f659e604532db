"""Unit tests for Orders event handlers and their bus subscriptions."""

from __future__ import annotations

import logging
from uuid import uuid4

import pytest

from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderReviewed,
    OrderStatusChanged,
)
from modules.orders.handlers import (
    OrderCancelledHandler,
    OrderCreatedHandler,
    OrderReviewedHandler,
    OrderStatusChangedHandler,
    order_created_handler,
)
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("handler", "event", "log_event"),
    [
        (
            OrderCreatedHandler(),
            OrderCreated(aggregate_id=uuid4(), order_number="ORD-2605-000001"),
            "order.event.created",
        ),
        (
            OrderStatusChangedHandler(),
            OrderStatusChanged(
                aggregate_id=uuid4(), old_status="pending", new_status="in_progress"
            ),
            "order.event.status_changed",
        ),
        (
            OrderCancelledHandler(),
            OrderCancelled(aggregate_id=uuid4(), reason="No longer needed"),
            "order.event.cancelled",
        ),
        (
            OrderReviewedHandler(),
            OrderReviewed(aggregate_id=uuid4(), rating=5),
            "order.event.reviewed",
        ),
    ],
)
def test_handler_logs_event(caplog, handler, event, log_event):
    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        handler.handle(event)

    assert any(log_event in record.getMessage() for record in caplog.records)


def test_app_ready_subscribes_handlers():
    assert order_created_handler in event_bus.handlers_for(OrderCreated)
    for event_type in (OrderStatusChanged, OrderCancelled, OrderReviewed):
        assert event_bus.handlers_for(event_type)
