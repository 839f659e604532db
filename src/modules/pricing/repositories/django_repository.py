"""Django ORM implementation of the pricing rule store.

Satisfies ``IPricingRuleRepository`` using Django's QuerySet API.
Point look-ups hit the ``(category, applies_to, is_active)`` index, so
each one is a single indexed query regardless of catalog size.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.pricing.constants import DEFAULT_RULES
from modules.pricing.models import PricingRule
from modules.pricing.repositories.interfaces import IPricingRuleRepository

logger = structlog.get_logger(__name__)

_PREFERENCE_ORDER = ("-priority", "display_order")


class PricingRuleDjangoRepository(IPricingRuleRepository):
    """Concrete pricing rule repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Engine look-ups
    # ------------------------------------------------------------------

    def find_active_rule(self, category: str, applies_to: str) -> Optional[PricingRule]:
        return (
            PricingRule.objects.filter(
                category=category, applies_to=applies_to, is_active=True
            )
            .order_by(*_PREFERENCE_ORDER)
            .first()
        )

    def get_active_rule_by_name(self, name: str) -> Optional[PricingRule]:
        return PricingRule.objects.filter(name=name, is_active=True).first()

    def list_active_by_category(self, category: str) -> List[PricingRule]:
        return list(
            PricingRule.objects.filter(category=category, is_active=True).order_by(
                *_PREFERENCE_ORDER
            )
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[PricingRule]:
        """Retrieve a rule by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return PricingRule.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[PricingRule]:
        return PricingRule.objects.filter(name=name.strip()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[PricingRule]:
        """List rules with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_active": True}
            {"category": "urgency"}
        """
        queryset = PricingRule.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: PricingRule) -> PricingRule:
        entity.save()
        logger.info("pricing_rule.saved", rule_id=str(entity.id), name=entity.name)
        return entity

    @transaction.atomic
    def upsert(self, data: Dict[str, Any]) -> PricingRule:
        name = data["name"].strip()
        defaults = {key: value for key, value in data.items() if key != "name"}
        rule, created = PricingRule.objects.update_or_create(name=name, defaults=defaults)
        logger.info(
            "pricing_rule.upserted",
            rule_id=str(rule.id),
            name=rule.name,
            created=created,
        )
        return rule

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a rule by ID.

        Returns ``True`` if a rule was removed, ``False`` if none matched.
        """
        rule = self.get_by_id(id)
        if not rule:
            return False
        rule.delete()
        logger.info("pricing_rule.deleted", rule_id=str(id))
        return True

    @transaction.atomic
    def delete_all(self) -> int:
        count, _ = PricingRule.objects.all().delete()
        logger.info("pricing_rule.deleted_all", count=count)
        return count

    @transaction.atomic
    def seed_defaults(self) -> List[PricingRule]:
        """Wipe the catalog and insert the default rule set.

        Destructive and idempotent: running it twice leaves the same catalog.
        """
        removed = self.delete_all()
        rules = PricingRule.objects.bulk_create(
            [PricingRule(**data) for data in DEFAULT_RULES]
        )
        logger.info("pricing_rule.seeded", removed=removed, inserted=len(rules))
        return rules
