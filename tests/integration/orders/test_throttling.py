"""Integration tests for scoped throttling on order endpoints.

The test environment lowers ``order_creation`` and ``price_preview`` to
five requests per minute.
"""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def test_order_creation_is_throttled(requester_client, seeded_catalog, order_payload):
    for _ in range(5):
        response = requester_client.post(URL, order_payload, format="json")
        assert response.status_code == 201

    response = requester_client.post(URL, order_payload, format="json")

    assert response.status_code == 429
    assert response.json()["errors"][0]["code"] == "throttled"


def test_order_listing_has_higher_limit(requester_client):
    for _ in range(10):
        response = requester_client.get(URL)
        assert response.status_code == 200


def test_public_price_preview_is_throttled(api_client, seeded_catalog):
    payload = {"education_level": "undergraduate", "task_type": "essay"}

    for _ in range(5):
        assert api_client.post("/api/v1/pricing/calculate/", payload, format="json").status_code == 200

    response = api_client.post("/api/v1/pricing/calculate/", payload, format="json")

    assert response.status_code == 429
