"""Pricing domain exceptions.

Raised by the Service Layer when rule administration violates a
business rule.  The pricing engine itself never raises for a missing
rule: absence simply contributes a multiplier of 1.0.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError


class PricingRuleNotFound(NotFoundError):
    """The requested pricing rule does not exist."""


class PricingRuleAlreadyExists(ConflictError):
    """A pricing rule with the same name already exists."""
