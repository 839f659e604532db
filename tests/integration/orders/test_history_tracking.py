"""The status history is an append-only log that ends at the current status."""

from __future__ import annotations

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import ReviewDTO
from modules.orders.models import Order, OrderStatusHistory

pytestmark = pytest.mark.integration


def _assert_history_consistent(order_id) -> list[OrderStatusHistory]:
    order = Order.objects.get(id=order_id)
    history = list(OrderStatusHistory.objects.filter(order_id=order_id))
    timestamps = [entry.created_at for entry in history]

    assert history, "every order has at least its creation entry"
    assert timestamps == sorted(timestamps)
    assert history[-1].new_status == order.status
    return history


class TestHistoryInvariant:
    def test_full_lifecycle(self, order_service, pending_order, admin):
        order_id = str(pending_order.id)
        _assert_history_consistent(order_id)

        for status in (OrderStatus.IN_PROGRESS, OrderStatus.REVIEW, OrderStatus.COMPLETED):
            order_service.transition_status(order_id, admin, status)
            _assert_history_consistent(order_id)

        history = _assert_history_consistent(order_id)
        assert [entry.new_status for entry in history] == [
            OrderStatus.PENDING,
            OrderStatus.IN_PROGRESS,
            OrderStatus.REVIEW,
            OrderStatus.COMPLETED,
        ]
        assert [entry.old_status for entry in history[1:]] == [
            entry.new_status for entry in history[:-1]
        ]

    def test_completed_order_fixture(self, completed_order):
        history = _assert_history_consistent(completed_order.id)

        assert len(history) == 4

    def test_cancellation_and_no_ops(self, order_service, pending_order, admin, requester):
        order_id = str(pending_order.id)

        order_service.transition_status(order_id, admin, OrderStatus.PENDING)
        order_service.cancel_order(order_id, requester, reason="Found another writer")

        history = _assert_history_consistent(order_id)
        assert [entry.new_status for entry in history] == [
            OrderStatus.PENDING,
            OrderStatus.CANCELLED,
        ]

    def test_review_does_not_touch_history(self, order_service, completed_order, requester):
        before = len(_assert_history_consistent(completed_order.id))

        order_service.submit_review(
            str(completed_order.id), requester, ReviewDTO(rating=5, review="Great work")
        )

        assert len(_assert_history_consistent(completed_order.id)) == before
