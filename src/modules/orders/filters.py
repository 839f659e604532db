import django_filters

from modules.orders.constants import EducationLevel, OrderStatus, TaskType, Urgency
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    education_level = django_filters.ChoiceFilter(choices=EducationLevel.choices)
    task_type = django_filters.ChoiceFilter(choices=TaskType.choices)
    urgency = django_filters.ChoiceFilter(choices=Urgency.choices)
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    deadline_before = django_filters.DateTimeFilter(
        field_name="deadline", lookup_expr="lte"
    )
    min_total = django_filters.NumberFilter(field_name="total_price", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total_price", lookup_expr="lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "education_level",
            "task_type",
            "urgency",
            "start_date",
            "end_date",
            "deadline_before",
            "min_total",
            "max_total",
        ]
