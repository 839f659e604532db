"""Order mutations commit completely or not at all.

A failure after the status has been changed in memory, or after the history
row has been written, must leave the stored status, the history and the
outbox exactly as they were.
"""

from __future__ import annotations

import pytest

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration


def _snapshot(order):
    return (
        Order.objects.get(id=order.id).status,
        OrderStatusHistory.objects.filter(order_id=order.id).count(),
        OutboxEvent.objects.filter(aggregate_id=str(order.id)).count(),
    )


def _explode(*args, **kwargs):
    raise RuntimeError("storage failure")


class TestStatusChangeAtomicity:
    def test_history_failure_leaves_order_untouched(
        self, order_service, pending_order, admin, monkeypatch
    ):
        before = _snapshot(pending_order)
        monkeypatch.setattr(OrderDjangoRepository, "add_history", _explode)

        with pytest.raises(RuntimeError):
            order_service.transition_status(
                str(pending_order.id), admin, OrderStatus.IN_PROGRESS
            )

        assert _snapshot(pending_order) == before
        assert before[0] == OrderStatus.PENDING

    def test_save_failure_rolls_back_history_row(
        self, order_service, pending_order, admin, monkeypatch
    ):
        before = _snapshot(pending_order)
        monkeypatch.setattr(OrderDjangoRepository, "save", _explode)

        with pytest.raises(RuntimeError):
            order_service.transition_status(
                str(pending_order.id), admin, OrderStatus.IN_PROGRESS
            )

        assert _snapshot(pending_order) == before

    def test_cancel_failure_keeps_order_open(
        self, order_service, pending_order, requester, monkeypatch
    ):
        before = _snapshot(pending_order)
        monkeypatch.setattr(OrderDjangoRepository, "save", _explode)

        with pytest.raises(RuntimeError):
            order_service.cancel_order(str(pending_order.id), requester, reason="Changed mind")

        assert _snapshot(pending_order) == before

    def test_failed_creation_leaves_nothing_behind(
        self, order_service, seeded_catalog, requester, create_dto, monkeypatch
    ):
        monkeypatch.setattr(OrderDjangoRepository, "add_history", _explode)

        with pytest.raises(RuntimeError):
            order_service.create_order(create_dto, requester)

        assert Order.objects.count() == 0
        assert OutboxEvent.objects.count() == 0
