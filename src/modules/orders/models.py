"""Order and OrderStatusHistory models.

Business rules implemented:
- ``order_number`` is unique for the lifetime of the system and never changes.
- ``requester`` is fixed at creation.
- Prices are set once at creation; rule edits never re-price an order.
- ``urgency`` is derived from the deadline, never taken from the caller.
- ``progress`` is clamped to [0, 100] on every write.
- ``rating`` / ``review`` are write-once and only reachable from ``completed``.
- Every status change appends an ``OrderStatusHistory`` row in the same
  transaction (enforced at service layer).
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Optional

import structlog
from django.conf import settings
from django.core.validators import (
    MaxLengthValidator,
    MaxValueValidator,
    MinValueValidator,
)
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    ADMIN_NOTES_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    INSTRUCTIONS_MAX_LENGTH,
    PAGE_COUNT_MAX,
    PAGE_COUNT_MIN,
    PROGRESS_MAX,
    PROGRESS_MIN,
    RATING_MAX,
    RATING_MIN,
    REVIEW_MAX_LENGTH,
    SUBJECT_MAX_LENGTH,
    TERMINAL_STATES,
    TITLE_MAX_LENGTH,
    CitationStyle,
    ComplexityLevel,
    EducationLevel,
    OrderStatus,
    TaskType,
    Urgency,
)
from modules.pricing.constants import CURRENCY
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


def clamp_progress(value: Any) -> int:
    """Clamp a progress value to ``[0, 100]``."""
    return max(PROGRESS_MIN, min(PROGRESS_MAX, int(value)))


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``order_number`` (``ORD-YYMM-NNNNNN``) is assigned by the order number
    policy before the first insert.  The UUIDv7 ``id`` is used for all
    internal references and API lookups.
    """

    order_number: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    requester: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    # Specification
    education_level: models.CharField = models.CharField(
        max_length=20, choices=EducationLevel.choices
    )
    task_type: models.CharField = models.CharField(
        max_length=32, choices=TaskType.choices
    )
    subject: models.CharField = models.CharField(max_length=SUBJECT_MAX_LENGTH)
    title: models.CharField = models.CharField(max_length=TITLE_MAX_LENGTH)
    description: models.TextField = models.TextField(
        validators=[MaxLengthValidator(DESCRIPTION_MAX_LENGTH)]
    )
    additional_instructions: models.TextField = models.TextField(
        blank=True,
        default="",
        validators=[MaxLengthValidator(INSTRUCTIONS_MAX_LENGTH)],
    )
    page_count: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(PAGE_COUNT_MIN), MaxValueValidator(PAGE_COUNT_MAX)],
    )
    number_of_sources: models.PositiveIntegerField = models.PositiveIntegerField(
        default=0
    )
    complexity_level: models.CharField = models.CharField(
        max_length=20,
        choices=ComplexityLevel.choices,
        default=ComplexityLevel.STANDARD,
    )
    citation_style: models.CharField = models.CharField(
        max_length=20,
        choices=CitationStyle.choices,
        default=CitationStyle.NONE,
    )

    # Timing
    deadline: models.DateTimeField = models.DateTimeField()
    urgency: models.CharField = models.CharField(
        max_length=20,
        choices=Urgency.choices,
        default=Urgency.STANDARD,
    )

    # Pricing
    base_price: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    total_price: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    currency: models.CharField = models.CharField(
        max_length=3, default=CURRENCY, editable=False
    )

    # Lifecycle
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    progress: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(PROGRESS_MIN), MaxValueValidator(PROGRESS_MAX)],
    )
    admin_notes: models.TextField = models.TextField(
        blank=True,
        default="",
        validators=[MaxLengthValidator(ADMIN_NOTES_MAX_LENGTH)],
    )

    # Post-completion feedback
    rating: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(RATING_MIN), MaxValueValidator(RATING_MAX)],
    )
    review: models.TextField = models.TextField(
        blank=True,
        default="",
        validators=[MaxLengthValidator(REVIEW_MAX_LENGTH)],
    )
    reviewed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(
                fields=["requester", "-created_at"],
                name="orders_requester_created_idx",
            ),
            models.Index(fields=["deadline"], name="orders_deadline_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(progress__gte=PROGRESS_MIN)
                & models.Q(progress__lte=PROGRESS_MAX),
                name="orders_progress_range",
            ),
            models.CheckConstraint(
                condition=models.Q(rating__isnull=True)
                | (models.Q(rating__gte=RATING_MIN) & models.Q(rating__lte=RATING_MAX)),
                name="orders_rating_range",
            ),
            models.CheckConstraint(
                condition=models.Q(base_price__gte=0) & models.Q(total_price__gte=0),
                name="orders_prices_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    @property
    def is_reviewed(self) -> bool:
        return self.rating is not None

    def set_progress(self, value: Any) -> None:
        self.progress = clamp_progress(value)

    # ------------------------------------------------------------------
    # Deadline helpers
    # ------------------------------------------------------------------

    @property
    def is_overdue(self) -> bool:
        """Deadline has passed and the order is still open."""
        if self.deadline is None or self.is_terminal:
            return False
        return self.deadline < timezone.now()

    @property
    def days_until_deadline(self) -> Optional[int]:
        """Whole days left until the deadline, rounded up (negative once past)."""
        if self.deadline is None:
            return None
        remaining = (self.deadline - timezone.now()).total_seconds()
        return math.ceil(remaining / 86400)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    The first row is written with the order itself (``old_status`` is
    ``None``); every later row records one actual status change.
    ``changed_by`` is nullable: ``None`` means the change was performed by
    the system or the user was later removed.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    changed_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"
