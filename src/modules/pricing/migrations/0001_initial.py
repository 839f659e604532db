from decimal import Decimal

import django.core.validators
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PricingRule",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100, unique=True)),
                (
                    "description",
                    models.CharField(blank=True, default="", max_length=500),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("education_level", "Education level"),
                            ("task_type", "Task type"),
                            ("urgency", "Urgency"),
                            ("complexity", "Complexity"),
                            ("page_count", "Page count"),
                            ("citation_style", "Citation style"),
                        ],
                        max_length=32,
                    ),
                ),
                ("applies_to", models.CharField(max_length=64)),
                (
                    "multiplier",
                    models.DecimalField(
                        decimal_places=3,
                        max_digits=6,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.1")),
                            django.core.validators.MaxValueValidator(Decimal("10")),
                        ],
                    ),
                ),
                (
                    "base_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00"))
                        ],
                    ),
                ),
                ("display_name", models.CharField(max_length=100)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("priority", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "pricing_rules",
                "ordering": ["category", "display_order"],
                "indexes": [
                    models.Index(
                        fields=["category", "applies_to", "is_active"],
                        name="pricing_rule_lookup_idx",
                    ),
                    models.Index(
                        fields=["-priority"], name="pricing_rule_priority_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("multiplier__gte", Decimal("0.1")),
                            ("multiplier__lte", Decimal("10")),
                        ),
                        name="pricing_rules_multiplier_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("base_price__gte", 0)),
                        name="pricing_rules_base_price_non_negative",
                    ),
                ],
            },
        ),
    ]
