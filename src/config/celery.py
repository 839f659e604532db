"""Celery app for background order work.

Workers and beat read every ``CELERY_*`` Django setting.  Registered tasks:

* ``orders.relay_outbox_events``: publishes pending order events,
  scheduled by ``CELERY_BEAT_SCHEDULE["relay-order-outbox"]``.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("academic_orders")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks(related_name="tasks")
