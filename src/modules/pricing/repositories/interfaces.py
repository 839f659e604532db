"""Pricing rule store interface.

The Pricing Engine depends only on ``find_active_rule`` /
``get_active_rule_by_name``; administration uses the rest.  Look-ups that
find nothing return ``None``; a missing rule is an expected case, never
an error.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.pricing.models import PricingRule


class IPricingRuleRepository(IRepository["PricingRule"]):
    """Repository contract for the pricing rule catalog."""

    @abstractmethod
    def find_active_rule(self, category: str, applies_to: str) -> Optional[PricingRule]:
        """Return the preferred active rule for ``(category, applies_to)``.

        Preference: highest ``priority``, then lowest ``display_order``.
        """

    @abstractmethod
    def get_active_rule_by_name(self, name: str) -> Optional[PricingRule]:
        """Return the active rule with the given unique name."""

    @abstractmethod
    def list_active_by_category(self, category: str) -> List[PricingRule]:
        """Active rules of a category, by priority desc then display order asc."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[PricingRule]:
        """Return the rule with the given name regardless of its status."""

    @abstractmethod
    def upsert(self, data: Dict[str, Any]) -> PricingRule:
        """Create the rule named ``data["name"]`` or update it in place."""

    @abstractmethod
    def delete_all(self) -> int:
        """Remove every rule; returns the number removed."""

    @abstractmethod
    def seed_defaults(self) -> List[PricingRule]:
        """Replace the whole catalog with the default rule set."""
