"""Pricing domain constants.

Defines the rule categories, the order attributes each category prices,
and the default rule catalog installed by ``seed_defaults()``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from django.db import models


class RuleCategory(models.TextChoices):
    EDUCATION_LEVEL = "education_level", "Education level"
    TASK_TYPE = "task_type", "Task type"
    URGENCY = "urgency", "Urgency"
    COMPLEXITY = "complexity", "Complexity"
    PAGE_COUNT = "page_count", "Page count"
    CITATION_STYLE = "citation_style", "Citation style"


BASE_PRICE_RULE_NAME = "base_price_per_page"
DEFAULT_BASE_PRICE_PER_PAGE = Decimal("15.00")

MULTIPLIER_MIN = Decimal("0.1")
MULTIPLIER_MAX = Decimal("10")

CURRENCY = "USD"

# Applied left to right; the engine multiplies in exactly this order.
MULTIPLIER_SEQUENCE: tuple[str, ...] = (
    RuleCategory.EDUCATION_LEVEL,
    RuleCategory.TASK_TYPE,
    RuleCategory.URGENCY,
    RuleCategory.COMPLEXITY,
    RuleCategory.CITATION_STYLE,
)


def _rule(
    name: str,
    category: str,
    applies_to: str,
    multiplier: str,
    display_name: str,
    display_order: int,
    priority: int,
) -> Dict[str, Any]:
    return {
        "name": name,
        "category": category,
        "applies_to": applies_to,
        "multiplier": Decimal(multiplier),
        "display_name": display_name,
        "display_order": display_order,
        "priority": priority,
    }


DEFAULT_RULES: List[Dict[str, Any]] = [
    # Education level
    _rule("high_school_level", RuleCategory.EDUCATION_LEVEL, "high_school", "1.0", "High School", 1, 10),
    _rule("undergraduate_level", RuleCategory.EDUCATION_LEVEL, "undergraduate", "1.5", "Undergraduate", 2, 10),
    _rule("graduate_level", RuleCategory.EDUCATION_LEVEL, "graduate", "2.0", "Graduate", 3, 10),
    _rule("phd_level", RuleCategory.EDUCATION_LEVEL, "phd", "3.0", "PhD", 4, 10),
    # Task type
    _rule("essay_task", RuleCategory.TASK_TYPE, "essay", "1.0", "Essay", 1, 10),
    _rule("research_paper_task", RuleCategory.TASK_TYPE, "research_paper", "1.5", "Research Paper", 2, 10),
    _rule("thesis_task", RuleCategory.TASK_TYPE, "thesis", "3.0", "Thesis", 3, 10),
    _rule("dissertation_task", RuleCategory.TASK_TYPE, "dissertation", "4.0", "Dissertation", 4, 10),
    _rule("editing_task", RuleCategory.TASK_TYPE, "editing", "0.6", "Editing", 5, 10),
    _rule("proofreading_task", RuleCategory.TASK_TYPE, "proofreading", "0.4", "Proofreading", 6, 10),
    # Urgency
    _rule("standard_urgency", RuleCategory.URGENCY, "standard", "1.0", "Standard (more than 3 days)", 1, 5),
    _rule("rush_urgency", RuleCategory.URGENCY, "rush", "1.25", "Rush (1-3 days)", 2, 5),
    _rule("urgent_urgency", RuleCategory.URGENCY, "urgent", "1.5", "Urgent (within 24 hours)", 3, 5),
    # Complexity
    _rule("basic_complexity", RuleCategory.COMPLEXITY, "basic", "0.8", "Basic", 1, 5),
    _rule("standard_complexity", RuleCategory.COMPLEXITY, "standard", "1.0", "Standard", 2, 5),
    _rule("advanced_complexity", RuleCategory.COMPLEXITY, "advanced", "1.3", "Advanced", 3, 5),
    _rule("expert_complexity", RuleCategory.COMPLEXITY, "expert", "1.5", "Expert", 4, 5),
    # Citation style
    _rule("no_citation", RuleCategory.CITATION_STYLE, "none", "1.0", "No Citation Style", 1, 3),
    _rule("apa_citation", RuleCategory.CITATION_STYLE, "apa", "1.1", "APA", 2, 3),
    _rule("mla_citation", RuleCategory.CITATION_STYLE, "mla", "1.1", "MLA", 3, 3),
    _rule("chicago_citation", RuleCategory.CITATION_STYLE, "chicago", "1.15", "Chicago", 4, 3),
    _rule("harvard_citation", RuleCategory.CITATION_STYLE, "harvard", "1.15", "Harvard", 5, 3),
    _rule("ieee_citation", RuleCategory.CITATION_STYLE, "ieee", "1.2", "IEEE", 6, 3),
]
