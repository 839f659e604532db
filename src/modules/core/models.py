"""Shared persistence primitives.

``BaseModel`` gives every table a time-ordered UUIDv7 key and audit
timestamps.  ``OutboxEvent`` stores order lifecycle events written in the
same transaction as the order change; the relay task drains it.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.db.models import Q
from django.utils import timezone


class BaseModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        # auto_now is skipped by partial saves unless the column is listed.
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "updated_at"]
        super().save(*args, **kwargs)


class EventStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PUBLISHED = "PUBLISHED", "Published"
    FAILED = "FAILED", "Failed"


class OutboxEventQuerySet(models.QuerySet):
    def for_topic(self, topic: str) -> "OutboxEventQuerySet":
        return self.filter(topic=topic)

    def relayable(self, max_attempts: int) -> "OutboxEventQuerySet":
        """Rows still owed to subscribers, oldest first.

        Failed rows stay eligible until they have been tried ``max_attempts``
        times.
        """
        return self.filter(
            Q(status=EventStatus.PENDING)
            | Q(status=EventStatus.FAILED, retry_count__lt=max_attempts)
        ).order_by("created_at")

    def backlog(self) -> int:
        return self.filter(status=EventStatus.PENDING).count()


class OutboxEvent(BaseModel):
    """One order event awaiting (or done with) relay to the event bus."""

    event_type = models.CharField(max_length=100)
    payload = models.JSONField()
    aggregate_id = models.CharField(max_length=255)
    topic = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.PENDING,
    )
    processed_at = models.DateTimeField(null=True, blank=True, default=None)
    error_message = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    retry_count = models.PositiveIntegerField(default=0)

    objects = OutboxEventQuerySet.as_manager()

    class Meta:
        db_table = "outbox_events"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event_type"], name="outbox_event_type_idx"),
            models.Index(fields=["aggregate_id"], name="outbox_aggregate_id_idx"),
            models.Index(
                fields=["status", "created_at"], name="outbox_status_created_idx"
            ),
        ]

    @property
    def is_published(self) -> bool:
        return self.status == EventStatus.PUBLISHED

    def mark_as_published(self) -> None:
        self.status = EventStatus.PUBLISHED
        self.processed_at = timezone.now()
        self.error_message = None
        self.save(update_fields=["status", "processed_at", "error_message"])

    def mark_as_failed(self, error: str) -> None:
        """Record a failed relay attempt; ``processed_at`` stays unset."""
        self.status = EventStatus.FAILED
        self.error_message = error
        self.retry_count += 1
        self.save(update_fields=["status", "error_message", "retry_count"])

    def __str__(self) -> str:
        return f"{self.event_type}#{self.aggregate_id} [{self.status}]"
