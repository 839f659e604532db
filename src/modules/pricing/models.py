"""PricingRule model: the administrator-configured multiplier catalog.

Business rules implemented:
- ``name`` is unique across the catalog.
- ``multiplier`` is bounded to [0.1, 10].
- ``base_price`` only matters for the distinguished ``base_price_per_page``
  rule, which overrides the default per-page rate.
- ``is_active`` is the soft-delete flag: inactive rules never price.
- Orders never reference rules, so editing a rule leaves stored prices alone.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.pricing.constants import MULTIPLIER_MAX, MULTIPLIER_MIN, RuleCategory

logger = structlog.get_logger(__name__)


class PricingRule(BaseModel):
    """A multiplier keyed by ``(category, applies_to)``.

    When more than one active rule matches the same pair, the one with the
    highest ``priority`` wins, ties broken by the lowest ``display_order``.
    """

    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=500, blank=True, default="")
    category = models.CharField(max_length=32, choices=RuleCategory.choices)
    applies_to = models.CharField(max_length=64)
    multiplier = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        validators=[
            MinValueValidator(MULTIPLIER_MIN),
            MaxValueValidator(MULTIPLIER_MAX),
        ],
    )
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    display_name = models.CharField(max_length=100)
    display_order = models.PositiveIntegerField(default=0)
    priority = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "pricing_rules"
        ordering = ["category", "display_order"]
        indexes = [
            models.Index(
                fields=["category", "applies_to", "is_active"],
                name="pricing_rule_lookup_idx",
            ),
            models.Index(fields=["-priority"], name="pricing_rule_priority_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(multiplier__gte=MULTIPLIER_MIN)
                & models.Q(multiplier__lte=MULTIPLIER_MAX),
                name="pricing_rules_multiplier_range",
            ),
            models.CheckConstraint(
                condition=models.Q(base_price__gte=0),
                name="pricing_rules_base_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.multiplier is not None and not (
            MULTIPLIER_MIN <= self.multiplier <= MULTIPLIER_MAX
        ):
            raise ValidationError(
                {"multiplier": "Multiplier must be between 0.1 and 10."}
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.name:
            self.name = self.name.strip()
        if self.applies_to:
            self.applies_to = self.applies_to.strip()
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} ({self.category}:{self.applies_to} x{self.multiplier})"
