"""Integration tests for order creation and price preview endpoints.

Covers:
- 201 on a valid order, priced from the rule catalog.
- Urgency derived from the deadline, never taken from the payload.
- 400 for malformed payloads and past deadlines.
- 401 without credentials.
- Side-effect-free price preview.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


class TestCreateOrderSuccess:
    def test_create_order_returns_201(self, requester_client, requester_user, seeded_catalog, order_payload):
        response = requester_client.post(URL, order_payload, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == OrderStatus.PENDING
        assert data["urgency"] == "standard"
        assert data["base_price"] == "30.00"
        assert data["total_price"] == "90.00"
        assert data["currency"] == "USD"
        assert data["requester_id"] == str(requester_user.pk)
        assert data["order_number"].startswith("ORD-")
        assert len(data["status_history"]) == 1
        assert data["status_history"][0]["old_status"] is None

    def test_urgency_in_payload_is_ignored(self, requester_client, seeded_catalog, order_payload):
        order_payload["urgency"] = "standard"
        order_payload["deadline"] = (timezone.now() + timedelta(hours=12)).isoformat()

        response = requester_client.post(URL, order_payload, format="json")

        assert response.status_code == 201
        assert response.json()["urgency"] == "urgent"
        assert response.json()["total_price"] == "135.00"

    def test_rush_deadline(self, requester_client, seeded_catalog, order_payload):
        order_payload["deadline"] = (timezone.now() + timedelta(hours=48)).isoformat()
        order_payload["citation_style"] = "apa"

        response = requester_client.post(URL, order_payload, format="json")

        assert response.json()["urgency"] == "rush"
        # 15 * 2 * 3.0 * 1.0 * 1.25 * 1.0 * 1.1
        assert response.json()["total_price"] == "123.75"


class TestCreateOrderValidation:
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("page_count", 0),
            ("page_count", 201),
            ("education_level", "kindergarten"),
            ("task_type", "poem"),
            ("title", ""),
        ],
    )
    def test_invalid_field_returns_400(self, requester_client, order_payload, field, value):
        order_payload[field] = value

        response = requester_client.post(URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == field
        assert Order.objects.count() == 0

    def test_missing_deadline_returns_400(self, requester_client, order_payload):
        del order_payload["deadline"]

        response = requester_client.post(URL, order_payload, format="json")

        assert response.status_code == 400

    def test_past_deadline_returns_400(self, requester_client, order_payload):
        order_payload["deadline"] = (timezone.now() - timedelta(minutes=5)).isoformat()

        response = requester_client.post(URL, order_payload, format="json")

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["attr"] == "deadline"
        assert error["code"] == "validation_failure"
        assert Order.objects.count() == 0

    def test_anonymous_returns_401(self, api_client, order_payload):
        response = api_client.post(URL, order_payload, format="json")

        assert response.status_code == 401


class TestPricePreview:
    def test_order_calculate_price(self, requester_client, seeded_catalog):
        response = requester_client.post(
            f"{URL}calculate-price/",
            {"education_level": "phd", "task_type": "essay", "page_count": 2},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_price"] == "90.00"
        assert data["rate_per_page"] == "15.00"
        assert [step["category"] for step in data["applied"]] == [
            "education_level",
            "task_type",
            "urgency",
            "complexity",
        ]
        assert Order.objects.count() == 0

    def test_preview_with_deadline_derives_urgency(self, requester_client, seeded_catalog):
        response = requester_client.post(
            f"{URL}calculate-price/",
            {
                "education_level": "phd",
                "task_type": "essay",
                "page_count": 2,
                "urgency": "standard",
                "deadline": (timezone.now() + timedelta(hours=6)).isoformat(),
            },
            format="json",
        )

        assert response.json()["urgency"] == "urgent"

    def test_preview_requires_authentication(self, api_client):
        response = api_client.post(
            f"{URL}calculate-price/",
            {"education_level": "phd", "task_type": "essay"},
            format="json",
        )

        assert response.status_code == 401
