"""Celery tasks for the Orders bounded context.

``relay_outbox_events`` drains the transactional outbox: every pending
(or retryable failed) order event is rebuilt and published on the
in-process event bus, then marked published or failed.
"""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import OutboxEvent
from modules.orders.repositories.django_repository import OUTBOX_TOPIC
from shared.domain.events import event_from_payload
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

MAX_RELAY_ATTEMPTS = 5
RELAY_BATCH_SIZE = 100


@shared_task(name="orders.relay_outbox_events")
def relay_outbox_events(batch_size: int = RELAY_BATCH_SIZE) -> int:
    """Publish a batch of outbox rows; return how many were published."""
    published = 0
    with transaction.atomic():
        batch = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .for_topic(OUTBOX_TOPIC)
            .relayable(MAX_RELAY_ATTEMPTS)[:batch_size]
        )
        for record in batch:
            log = logger.bind(
                outbox_id=str(record.id),
                event_type=record.event_type,
                aggregate_id=record.aggregate_id,
            )
            try:
                event_bus.publish(event_from_payload(record.event_type, record.payload))
            except Exception as exc:
                log.exception("outbox.relay_failed")
                record.mark_as_failed(str(exc))
                continue
            record.mark_as_published()
            published += 1

    if batch:
        logger.info("outbox.relayed", published=published, fetched=len(batch))
    return published
