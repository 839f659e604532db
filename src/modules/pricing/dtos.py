"""Pricing rule DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreatePricingRuleDTO``: input for rule creation.
- ``UpdatePricingRuleDTO``: input for partial rule updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.pricing.constants import MULTIPLIER_MAX, MULTIPLIER_MIN, RuleCategory


def _check_multiplier(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and not (MULTIPLIER_MIN <= v <= MULTIPLIER_MAX):
        raise ValueError("Multiplier must be between 0.1 and 10.")
    return v


class CreatePricingRuleDTO(BaseModel):
    """Immutable DTO for rule creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=100)
    category: RuleCategory
    applies_to: str = Field(min_length=1, max_length=64)
    multiplier: Decimal
    display_name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    base_price: Decimal = Field(default=Decimal("0.00"), ge=0)
    display_order: int = Field(default=0, ge=0)
    priority: int = 0
    is_active: bool = True

    @field_validator("name", "applies_to", "display_name")
    @classmethod
    def strip_and_require(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank.")
        return v

    @field_validator("multiplier")
    @classmethod
    def multiplier_in_range(cls, v: Decimal) -> Decimal:
        return _check_multiplier(v)

    def to_model_data(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["category"] = self.category.value
        return data


class UpdatePricingRuleDTO(BaseModel):
    """Immutable DTO for rule update requests.

    All fields are optional; only supplied fields are updated.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[RuleCategory] = None
    applies_to: Optional[str] = Field(default=None, min_length=1, max_length=64)
    multiplier: Optional[Decimal] = None
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    base_price: Optional[Decimal] = Field(default=None, ge=0)
    display_order: Optional[int] = Field(default=None, ge=0)
    priority: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("multiplier")
    @classmethod
    def multiplier_in_range(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _check_multiplier(v)

    def changes(self) -> Dict[str, Any]:
        """Return only the fields the caller supplied."""
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        if "category" in data:
            data["category"] = RuleCategory(data["category"]).value
        return data
