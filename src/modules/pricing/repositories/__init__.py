"""Pricing rule repositories package."""

from modules.pricing.repositories.django_repository import PricingRuleDjangoRepository
from modules.pricing.repositories.interfaces import IPricingRuleRepository

__all__ = ["IPricingRuleRepository", "PricingRuleDjangoRepository"]
