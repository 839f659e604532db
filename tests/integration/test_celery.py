"""Integration tests for the Celery configuration."""

import pytest

pytestmark = pytest.mark.integration


class TestCeleryConfig:
    def test_celery_app_exported_from_config(self):
        from config import celery_app

        assert celery_app.main == "academic_orders"

    def test_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_outbox_relay_is_scheduled(self, settings):
        schedule = settings.CELERY_BEAT_SCHEDULE["relay-order-outbox"]

        assert schedule["task"] == "orders.relay_outbox_events"
        assert schedule["schedule"] > 0

    def test_relay_task_is_registered(self):
        from config import celery_app
        from modules.orders.tasks import relay_outbox_events

        assert relay_outbox_events.name == "orders.relay_outbox_events"
        assert "orders.relay_outbox_events" in celery_app.tasks
