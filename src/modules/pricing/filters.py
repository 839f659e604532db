import django_filters

from modules.pricing.constants import RuleCategory
from modules.pricing.models import PricingRule


class PricingRuleFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=RuleCategory.choices)
    applies_to = django_filters.CharFilter(field_name="applies_to", lookup_expr="iexact")
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    is_active = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = PricingRule
        fields = ["category", "applies_to", "name", "is_active"]
