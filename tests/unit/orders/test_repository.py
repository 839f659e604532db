"""Unit tests for OrderDjangoRepository."""

from __future__ import annotations

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.orders.events import OrderStatusChanged
from modules.orders.models import OrderStatusHistory
from modules.orders.repositories.django_repository import (
    OUTBOX_TOPIC,
    OrderDjangoRepository,
)

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


class TestReads:
    def test_get_by_id_prefetches_history(self, repo, pending_order):
        order = repo.get_by_id(str(pending_order.id))

        assert order.order_number == pending_order.order_number
        assert len(order.status_history.all()) == 1

    @pytest.mark.parametrize("order_id", ["not-a-uuid", "0190a6d4-0000-7000-8000-000000000000"])
    def test_get_by_id_returns_none(self, repo, order_id):
        assert repo.get_by_id(order_id) is None
        assert repo.get_for_update(order_id) is None

    def test_get_by_order_number_normalises_input(self, repo, pending_order):
        found = repo.get_by_order_number(pending_order.order_number.lower())

        assert found.id == pending_order.id

    def test_list_applies_filters(self, repo, pending_order):
        assert repo.list({"status": "pending"}).count() == 1
        assert repo.list({"status": "completed"}).count() == 0


class TestWrites:
    def test_save_flushes_domain_events_to_outbox(self, repo, pending_order):
        order = repo.get_for_update(str(pending_order.id))
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status="pending", new_status="review"
            )
        )

        repo.save(order)

        row = OutboxEvent.objects.filter(event_type="OrderStatusChanged").get()
        assert row.topic == OUTBOX_TOPIC
        assert row.status == EventStatus.PENDING
        assert row.payload["new_status"] == "review"
        assert row.payload["aggregate_id"] == str(order.id)
        assert order.domain_events == []

    def test_add_history(self, repo, pending_order, admin):
        entry = repo.add_history(
            pending_order,
            new_status="review",
            old_status="pending",
            notes="Draft ready",
            changed_by_id=admin.id,
        )

        assert OrderStatusHistory.objects.filter(order_id=pending_order.id).count() == 2
        assert entry.notes == "Draft ready"

    def test_delete_cascades_history(self, repo, pending_order):
        assert repo.delete(str(pending_order.id)) is True
        assert not OrderStatusHistory.objects.filter(order_id=pending_order.id).exists()
        assert repo.delete(str(pending_order.id)) is False
