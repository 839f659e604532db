"""Pricing rule service layer (Use Cases).

Administrator operations over the rule catalog.  Authorization is
enforced by the API layer (``IsAdminUser``); this service owns the
catalog invariants (unique names, existence).
"""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.pricing.constants import RuleCategory
from modules.pricing.exceptions import PricingRuleAlreadyExists, PricingRuleNotFound
from modules.pricing.models import PricingRule

if TYPE_CHECKING:
    from modules.pricing.dtos import CreatePricingRuleDTO, UpdatePricingRuleDTO
    from modules.pricing.repositories.interfaces import IPricingRuleRepository

logger = structlog.get_logger(__name__)


class PricingRuleService:
    """Application service for pricing rule administration.

    Receives an ``IPricingRuleRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IPricingRuleRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_rule(self, dto: CreatePricingRuleDTO) -> PricingRule:
        """Create a rule.

        Raises:
            PricingRuleAlreadyExists: the name is already taken.
        """
        log = logger.bind(name=dto.name)
        if self._repo.get_by_name(dto.name):
            log.warning("pricing_rule.duplicate_name")
            raise PricingRuleAlreadyExists(f"Pricing rule '{dto.name}' already exists.")

        rule = self._repo.save(PricingRule(**dto.to_model_data()))
        log.info("pricing_rule.created", rule_id=str(rule.id))
        return rule

    @transaction.atomic
    def update_rule(self, id: str, dto: UpdatePricingRuleDTO) -> PricingRule:
        """Apply the supplied fields to an existing rule.

        Raises:
            PricingRuleNotFound: the rule does not exist.
            PricingRuleAlreadyExists: renaming onto a taken name.
        """
        rule = self._repo.get_by_id(id)
        if not rule:
            raise PricingRuleNotFound(f"Pricing rule {id} not found.")

        changes = dto.changes()
        new_name = changes.get("name")
        if new_name and new_name != rule.name:
            clash = self._repo.get_by_name(new_name)
            if clash and clash.id != rule.id:
                raise PricingRuleAlreadyExists(
                    f"Pricing rule '{new_name}' already exists."
                )

        for field, value in changes.items():
            setattr(rule, field, value)

        rule = self._repo.save(rule)
        logger.info("pricing_rule.updated", rule_id=str(id), fields=sorted(changes))
        return rule

    @transaction.atomic
    def delete_rule(self, id: str) -> None:
        """Delete a rule.

        Raises:
            PricingRuleNotFound: the rule does not exist.
        """
        if not self._repo.delete(id):
            raise PricingRuleNotFound(f"Pricing rule {id} not found.")

    def seed_defaults(self) -> List[PricingRule]:
        """Replace the catalog with the default rules (destructive)."""
        rules = self._repo.seed_defaults()
        logger.info("pricing_rule.catalog_seeded", count=len(rules))
        return rules

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_rule(self, id: str) -> PricingRule:
        rule = self._repo.get_by_id(id)
        if not rule:
            raise PricingRuleNotFound(f"Pricing rule {id} not found.")
        return rule

    def list_rules(self, filters: Optional[Dict[str, Any]] = None) -> List[PricingRule]:
        return self._repo.list(filters)

    def grouped_active_rules(self) -> Dict[str, List[Dict[str, Any]]]:
        """Active rules grouped by category as ``{value, label, multiplier}``.

        Categories without active rules are omitted.
        """
        grouped: Dict[str, List[Dict[str, Any]]] = OrderedDict()
        for category in RuleCategory:
            rules = self._repo.list_active_by_category(category)
            if not rules:
                continue
            grouped[category.value] = [
                {
                    "value": rule.applies_to,
                    "label": rule.display_name,
                    "multiplier": rule.multiplier,
                }
                for rule in sorted(rules, key=lambda r: r.display_order)
            ]
        return grouped
