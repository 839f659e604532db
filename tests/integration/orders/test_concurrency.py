"""Concurrent writers on one order are serialized by ``SELECT FOR UPDATE``.

Scenario:
- One ``pending`` order.
- Several threads race to cancel it, or to move it to ``in_progress``.
- Exactly one writer changes the order; the rest see the committed result
  (terminal conflict, or a same-status no-op) and add no history.

Threads need committed data and their own connections, so these tests run
with ``transaction=True``.  SQLite has no row locks and fails concurrent
writers with "database is locked" instead of queueing them, so the threaded
races only run against a database that supports ``SELECT FOR UPDATE``.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection, connections

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import InvalidOrderStatus
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.pricing.engine import PricingEngine
from modules.pricing.repositories import PricingRuleDjangoRepository

pytestmark = pytest.mark.integration

NUM_WORKERS = 8

needs_row_locks = pytest.mark.skipif(
    not connection.features.has_select_for_update,
    reason="database backend has no SELECT FOR UPDATE",
)


def _race(task, workers: int = NUM_WORKERS) -> list[str]:
    def _run(_index: int) -> str:
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            pricing_engine=PricingEngine(PricingRuleDjangoRepository()),
        )
        try:
            return task(service)
        finally:
            connections.close_all()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_run, range(workers)))


class TestRowLocking:
    def test_every_mutation_loads_with_a_row_lock(
        self, order_service, pending_order, admin, requester, monkeypatch
    ):
        locked_loads = []
        original = OrderDjangoRepository.get_for_update

        def _spy(self, id):
            locked_loads.append(id)
            return original(self, id)

        monkeypatch.setattr(OrderDjangoRepository, "get_for_update", _spy)
        order_id = str(pending_order.id)

        order_service.transition_status(order_id, admin, OrderStatus.IN_PROGRESS)
        order_service.cancel_order(order_id, requester)

        assert locked_loads == [order_id, order_id]

    def test_lock_query_requests_for_update(self, pending_order):
        queryset = Order.objects.select_for_update().filter(id=pending_order.id)

        assert queryset.query.select_for_update is True


@needs_row_locks
@pytest.mark.django_db(transaction=True)
class TestConcurrentWriters:
    def test_only_one_cancellation_wins(self, pending_order, requester):
        order_id = str(pending_order.id)

        def _cancel(service: OrderService) -> str:
            try:
                service.cancel_order(order_id, requester, reason="Race")
            except InvalidOrderStatus:
                return "conflict"
            return "cancelled"

        results = _race(_cancel)

        assert results.count("cancelled") == 1
        assert results.count("conflict") == NUM_WORKERS - 1
        assert (
            OrderStatusHistory.objects.filter(
                order_id=pending_order.id, new_status=OrderStatus.CANCELLED
            ).count()
            == 1
        )
        assert (
            OutboxEvent.objects.filter(
                aggregate_id=order_id, event_type="OrderCancelled"
            ).count()
            == 1
        )

    def test_same_transition_is_recorded_once(self, pending_order, admin):
        order_id = str(pending_order.id)

        def _start(service: OrderService) -> str:
            return service.transition_status(
                order_id, admin, OrderStatus.IN_PROGRESS
            ).status

        results = _race(_start)

        assert all(status == OrderStatus.IN_PROGRESS for status in results)
        history = OrderStatusHistory.objects.filter(order_id=pending_order.id)
        assert history.filter(new_status=OrderStatus.IN_PROGRESS).count() == 1
        assert history.count() == 2


@pytest.mark.django_db(transaction=True)
class TestCommittedReads:
    def test_later_writer_sees_committed_cancellation(self, pending_order, requester, admin):
        order_id = str(pending_order.id)

        first = _race(lambda service: service.cancel_order(order_id, requester).status, 1)

        def _resume(service: OrderService) -> str:
            try:
                service.transition_status(order_id, admin, OrderStatus.IN_PROGRESS)
            except InvalidOrderStatus:
                return "conflict"
            return "moved"

        second = _race(_resume, 1)

        assert first == [OrderStatus.CANCELLED]
        assert second == ["conflict"]
        assert Order.objects.get(id=pending_order.id).status == OrderStatus.CANCELLED
        assert OrderStatusHistory.objects.filter(order_id=pending_order.id).count() == 2
