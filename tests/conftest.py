from __future__ import annotations

from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from modules.core.actors import Actor
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.pricing.engine import PricingEngine
from modules.pricing.repositories import PricingRuleDjangoRepository

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Identities
# ---------------------------------------------------------------------------


@pytest.fixture()
def requester_user():
    return User.objects.create_user(username="student", password="testpass123")


@pytest.fixture()
def other_user():
    return User.objects.create_user(username="another-student", password="testpass123")


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="operator", password="testpass123", is_staff=True
    )


@pytest.fixture()
def requester(requester_user) -> Actor:
    return Actor.from_user(requester_user)


@pytest.fixture()
def stranger(other_user) -> Actor:
    return Actor.from_user(other_user)


@pytest.fixture()
def admin(admin_user) -> Actor:
    return Actor.from_user(admin_user)


@pytest.fixture()
def requester_client(requester_user):
    client = APIClient()
    client.force_authenticate(user=requester_user)
    return client


@pytest.fixture()
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Pricing & orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def rule_repository():
    return PricingRuleDjangoRepository()


@pytest.fixture()
def seeded_catalog(rule_repository):
    """Default rule catalog installed in the database."""
    return rule_repository.seed_defaults()


@pytest.fixture()
def order_service(rule_repository):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        pricing_engine=PricingEngine(rule_repository),
    )


def build_create_dto(**overrides) -> CreateOrderDTO:
    data = {
        "education_level": "phd",
        "task_type": "essay",
        "subject": "History",
        "title": "The fall of Rome",
        "description": "Analyse the causes of the fall of the Western Empire.",
        "page_count": 2,
        "deadline": timezone.now() + timedelta(days=7),
    }
    data.update(overrides)
    return CreateOrderDTO(**data)


@pytest.fixture()
def make_create_dto():
    """Factory for valid creation DTOs; keyword overrides replace fields."""
    return build_create_dto


@pytest.fixture()
def create_dto():
    return build_create_dto()


@pytest.fixture()
def pending_order(order_service, seeded_catalog, requester, create_dto):
    return order_service.create_order(create_dto, requester)


@pytest.fixture()
def completed_order(order_service, pending_order, admin):
    for status in (OrderStatus.IN_PROGRESS, OrderStatus.REVIEW, OrderStatus.COMPLETED):
        order = order_service.transition_status(str(pending_order.id), admin, status)
    return order


@pytest.fixture()
def cancelled_order(order_service, pending_order, requester):
    return order_service.cancel_order(str(pending_order.id), requester, reason="No longer needed")
