"""Unit tests for order number generation and the collision-retry policy.

Covers:
- ``ORD-YYMM-NNNNNN`` format.
- Retry on uniqueness collisions, bounded at three attempts.
- Non-collision failures abort without retry.
- Exhaustion leaves no partial order behind.
"""

from __future__ import annotations

import re
from datetime import datetime
from datetime import timezone as dt_timezone
from unittest.mock import Mock

import pytest
from django.db import IntegrityError
from freezegun import freeze_time

from modules.orders.exceptions import OrderCreationExhausted, OrderNumberCollision
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.numbering import OrderNumberPolicy, generate_order_number
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.pricing.engine import PricingEngine

pytestmark = pytest.mark.unit

ORDER_NUMBER_RE = re.compile(r"^ORD-\d{4}-\d{6}$")


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerateOrderNumber:
    def test_format_uses_year_month_and_zero_padded_digits(self):
        now = datetime(2026, 5, 3, tzinfo=dt_timezone.utc)

        assert generate_order_number(now=now, randbelow=lambda n: 4217) == "ORD-2605-004217"

    @freeze_time("2027-11-20 08:00:00")
    def test_defaults_to_current_month(self):
        number = generate_order_number()

        assert ORDER_NUMBER_RE.match(number)
        assert number.startswith("ORD-2711-")

    def test_draws_from_million_number_space(self):
        randbelow = Mock(return_value=999_999)

        number = generate_order_number(
            now=datetime(2026, 1, 1, tzinfo=dt_timezone.utc), randbelow=randbelow
        )

        randbelow.assert_called_once_with(1_000_000)
        assert number == "ORD-2601-999999"


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------


def _sequence(*numbers):
    return iter(numbers).__next__


class TestOrderNumberPolicy:
    def test_succeeds_on_third_attempt_after_two_collisions(self):
        seen = []

        def persist(number):
            seen.append(number)
            if len(seen) < 3:
                raise OrderNumberCollision(number)
            return number

        policy = OrderNumberPolicy(generator=_sequence("ORD-A", "ORD-B", "ORD-C"))

        assert policy.run(persist) == "ORD-C"
        assert seen == ["ORD-A", "ORD-B", "ORD-C"]

    def test_exhausts_after_three_collisions(self):
        persist = Mock(side_effect=OrderNumberCollision("taken"))
        policy = OrderNumberPolicy(generator=_sequence("ORD-A", "ORD-B", "ORD-C", "ORD-D"))

        with pytest.raises(OrderCreationExhausted) as exc_info:
            policy.run(persist)

        assert persist.call_count == 3
        assert exc_info.value.code == "order_creation_exhausted"
        assert exc_info.value.status_code == 503

    def test_other_failures_propagate_without_retry(self):
        persist = Mock(side_effect=IntegrityError("NOT NULL constraint failed"))
        policy = OrderNumberPolicy(generator=_sequence("ORD-A", "ORD-B"))

        with pytest.raises(IntegrityError):
            policy.run(persist)

        assert persist.call_count == 1

    def test_rejects_non_positive_attempt_budget(self):
        with pytest.raises(ValueError):
            OrderNumberPolicy(max_attempts=0)


# ---------------------------------------------------------------------------
# Against the database
# ---------------------------------------------------------------------------


def _service(rule_repository, *numbers) -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        pricing_engine=PricingEngine(rule_repository),
        numbering=OrderNumberPolicy(generator=_sequence(*numbers)),
    )


class TestCollisionsInDatabase:
    def test_retries_past_a_taken_number(
        self, rule_repository, pending_order, requester, create_dto
    ):
        taken = pending_order.order_number
        service = _service(rule_repository, taken, "ORD-2605-000002")

        order = service.create_order(create_dto, requester)

        assert order.order_number == "ORD-2605-000002"
        assert Order.objects.count() == 2

    def test_exhaustion_leaves_no_partial_order(
        self, rule_repository, pending_order, requester, create_dto
    ):
        taken = pending_order.order_number
        service = _service(rule_repository, taken, taken, taken)
        history_before = OrderStatusHistory.objects.count()

        with pytest.raises(OrderCreationExhausted):
            service.create_order(create_dto, requester)

        assert Order.objects.count() == 1
        assert OrderStatusHistory.objects.count() == history_before

    def test_repository_reports_collision_only_for_taken_numbers(self, pending_order):
        repo = OrderDjangoRepository()
        data = {
            field: getattr(pending_order, field)
            for field in (
                "requester_id",
                "education_level",
                "task_type",
                "subject",
                "title",
                "description",
                "deadline",
            )
        }

        with pytest.raises(OrderNumberCollision) as exc_info:
            repo.create(data, order_number=pending_order.order_number)

        assert exc_info.value.order_number == pending_order.order_number
