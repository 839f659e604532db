"""Pricing DRF serializers for API input/output.

Input serializers validate request payloads before they become
Pydantic DTOs; output serializers render rules and price quotes.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.pricing.constants import MULTIPLIER_MAX, MULTIPLIER_MIN, RuleCategory
from modules.pricing.models import PricingRule

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PricingRuleInputSerializer(serializers.Serializer):
    """Validates rule create/update payloads (use ``partial=True`` for PATCH)."""

    name = serializers.CharField(max_length=100)
    category = serializers.ChoiceField(choices=RuleCategory.choices)
    applies_to = serializers.CharField(max_length=64)
    multiplier = serializers.DecimalField(
        max_digits=6,
        decimal_places=3,
        min_value=MULTIPLIER_MIN,
        max_value=MULTIPLIER_MAX,
    )
    display_name = serializers.CharField(max_length=100)
    description = serializers.CharField(
        max_length=500, required=False, allow_blank=True
    )
    base_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )
    display_order = serializers.IntegerField(min_value=0, required=False)
    priority = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class PricingRuleSerializer(serializers.ModelSerializer):
    """Read serializer for the PricingRule resource."""

    class Meta:
        model = PricingRule
        fields = [
            "id",
            "name",
            "description",
            "category",
            "applies_to",
            "multiplier",
            "base_price",
            "display_name",
            "display_order",
            "priority",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AppliedMultiplierSerializer(serializers.Serializer):
    category = serializers.CharField()
    applies_to = serializers.CharField()
    multiplier = serializers.DecimalField(max_digits=6, decimal_places=3)
    rule_name = serializers.CharField(allow_null=True)


class PriceQuoteSerializer(serializers.Serializer):
    """Renders a ``PriceQuote`` including the per-category breakdown."""

    base_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    rate_per_page = serializers.DecimalField(max_digits=10, decimal_places=2)
    page_count = serializers.IntegerField()
    urgency = serializers.CharField()
    currency = serializers.CharField()
    applied = AppliedMultiplierSerializer(many=True)


class GroupedRuleOptionSerializer(serializers.Serializer):
    value = serializers.CharField()
    label = serializers.CharField()
    multiplier = serializers.DecimalField(max_digits=6, decimal_places=3)
