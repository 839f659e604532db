from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

from modules.pricing.models import PricingRule
from modules.pricing.repositories.interfaces import IPricingRuleRepository


class InMemoryPricingRuleRepository(IPricingRuleRepository):
    """Dict-backed rule store for engine tests (no database)."""

    def __init__(self) -> None:
        self.rules: Dict[str, PricingRule] = {}
        self.lookups: List[tuple] = []

    def add(
        self,
        category: str,
        applies_to: str,
        multiplier: str,
        name: Optional[str] = None,
        priority: int = 0,
        display_order: int = 0,
        is_active: bool = True,
        base_price: str = "0.00",
    ) -> PricingRule:
        rule = PricingRule(
            name=name or f"{applies_to}_{category}",
            category=category,
            applies_to=applies_to,
            multiplier=Decimal(multiplier),
            base_price=Decimal(base_price),
            display_name=applies_to,
            priority=priority,
            display_order=display_order,
            is_active=is_active,
        )
        self.rules[rule.name] = rule
        return rule

    def remove(self, name: str) -> None:
        del self.rules[name]

    def _active(self) -> List[PricingRule]:
        return [rule for rule in self.rules.values() if rule.is_active]

    def find_active_rule(self, category: str, applies_to: str) -> Optional[PricingRule]:
        self.lookups.append((str(category), str(applies_to)))
        matches = [
            rule
            for rule in self._active()
            if rule.category == category and rule.applies_to == applies_to
        ]
        matches.sort(key=lambda rule: (-rule.priority, rule.display_order))
        return matches[0] if matches else None

    def get_active_rule_by_name(self, name: str) -> Optional[PricingRule]:
        rule = self.rules.get(name)
        return rule if rule and rule.is_active else None

    def list_active_by_category(self, category: str) -> List[PricingRule]:
        matches = [rule for rule in self._active() if rule.category == category]
        return sorted(matches, key=lambda rule: (-rule.priority, rule.display_order))

    def get_by_id(self, id: str) -> Optional[PricingRule]:
        return next((r for r in self.rules.values() if str(r.id) == str(id)), None)

    def get_by_name(self, name: str) -> Optional[PricingRule]:
        return self.rules.get(name)

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[PricingRule]:
        return list(self.rules.values())

    def save(self, entity: PricingRule) -> PricingRule:
        self.rules[entity.name] = entity
        return entity

    def upsert(self, data: Dict[str, Any]) -> PricingRule:
        return self.save(PricingRule(**data))

    def delete(self, id: str) -> bool:
        rule = self.get_by_id(id)
        if rule is None:
            return False
        del self.rules[rule.name]
        return True

    def delete_all(self) -> int:
        count = len(self.rules)
        self.rules.clear()
        return count

    def seed_defaults(self) -> List[PricingRule]:
        raise NotImplementedError


@pytest.fixture()
def rule_store() -> InMemoryPricingRuleRepository:
    return InMemoryPricingRuleRepository()
