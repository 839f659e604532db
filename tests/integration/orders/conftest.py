from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone


@pytest.fixture()
def order_payload():
    """Valid creation payload: PhD essay, two pages, due in a week."""
    return {
        "education_level": "phd",
        "task_type": "essay",
        "subject": "History",
        "title": "The fall of Rome",
        "description": "Analyse the causes of the fall of the Western Empire.",
        "page_count": 2,
        "deadline": (timezone.now() + timedelta(days=7)).isoformat(),
    }


@pytest.fixture()
def order_url():
    def _url(order, suffix: str = "") -> str:
        base = f"/api/v1/orders/{order.id}/"
        return f"{base}{suffix}/" if suffix else base

    return _url
