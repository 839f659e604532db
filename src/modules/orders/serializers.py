"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import (
    ADMIN_NOTES_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    INSTRUCTIONS_MAX_LENGTH,
    PAGE_COUNT_MAX,
    PAGE_COUNT_MIN,
    RATING_MAX,
    RATING_MIN,
    REVIEW_MAX_LENGTH,
    STATUS_NOTE_MAX_LENGTH,
    SUBJECT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    CitationStyle,
    ComplexityLevel,
    EducationLevel,
    OrderStatus,
    TaskType,
    Urgency,
)
from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PriceQuoteRequestSerializer(serializers.Serializer):
    """Validates price preview payloads."""

    education_level = serializers.ChoiceField(choices=EducationLevel.choices)
    task_type = serializers.ChoiceField(choices=TaskType.choices)
    page_count = serializers.IntegerField(
        min_value=PAGE_COUNT_MIN, max_value=PAGE_COUNT_MAX, required=False
    )
    complexity_level = serializers.ChoiceField(
        choices=ComplexityLevel.choices, required=False
    )
    citation_style = serializers.ChoiceField(
        choices=CitationStyle.choices, required=False
    )
    urgency = serializers.ChoiceField(choices=Urgency.choices, required=False)
    deadline = serializers.DateTimeField(required=False)


class CreateOrderSerializer(PriceQuoteRequestSerializer):
    """Validates the order creation request payload.

    ``urgency`` is accepted for compatibility but always recomputed from
    the deadline.
    """

    subject = serializers.CharField(max_length=SUBJECT_MAX_LENGTH)
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(max_length=DESCRIPTION_MAX_LENGTH)
    additional_instructions = serializers.CharField(
        max_length=INSTRUCTIONS_MAX_LENGTH, required=False, allow_blank=True
    )
    number_of_sources = serializers.IntegerField(min_value=0, required=False)
    deadline = serializers.DateTimeField()


class UpdateOrderSerializer(serializers.Serializer):
    """Validates ``PATCH /orders/{id}/`` payloads."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    status_note = serializers.CharField(
        max_length=STATUS_NOTE_MAX_LENGTH, required=False, allow_blank=True
    )
    additional_instructions = serializers.CharField(
        max_length=INSTRUCTIONS_MAX_LENGTH, required=False, allow_blank=True
    )
    admin_notes = serializers.CharField(
        max_length=ADMIN_NOTES_MAX_LENGTH, required=False, allow_blank=True
    )
    progress = serializers.IntegerField(required=False)


class StatusTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    note = serializers.CharField(
        max_length=STATUS_NOTE_MAX_LENGTH, required=False, allow_blank=True, default=""
    )


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(
        max_length=STATUS_NOTE_MAX_LENGTH, required=False, allow_blank=True, default=""
    )


class ReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=RATING_MIN, max_value=RATING_MAX)
    review = serializers.CharField(
        max_length=REVIEW_MAX_LENGTH, required=False, allow_blank=True, default=""
    )


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "changed_by_id",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with the nested status history."""

    status_history = StatusHistorySerializer(many=True, read_only=True)
    requester_id = serializers.CharField(read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)
    days_until_deadline = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "requester_id",
            "education_level",
            "task_type",
            "subject",
            "title",
            "description",
            "additional_instructions",
            "page_count",
            "number_of_sources",
            "complexity_level",
            "citation_style",
            "deadline",
            "urgency",
            "base_price",
            "total_price",
            "currency",
            "status",
            "progress",
            "admin_notes",
            "rating",
            "review",
            "reviewed_at",
            "is_overdue",
            "days_until_deadline",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    requester_id = serializers.CharField(read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "requester_id",
            "title",
            "task_type",
            "education_level",
            "deadline",
            "urgency",
            "total_price",
            "currency",
            "status",
            "progress",
            "is_overdue",
            "created_at",
        ]
        read_only_fields = fields
