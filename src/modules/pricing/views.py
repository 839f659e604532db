"""Pricing API views.

Rule administration is restricted to staff users.  The price preview is
public: it reads the catalog and never persists anything.  Domain errors
propagate to the standardized exception handler.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import PriceQuoteRequestDTO
from modules.orders.quoting import quote_order
from modules.orders.serializers import PriceQuoteRequestSerializer
from modules.pricing.dtos import CreatePricingRuleDTO, UpdatePricingRuleDTO
from modules.pricing.engine import PricingEngine
from modules.pricing.filters import PricingRuleFilter
from modules.pricing.models import PricingRule
from modules.pricing.repositories import PricingRuleDjangoRepository
from modules.pricing.serializers import (
    PriceQuoteSerializer,
    PricingRuleInputSerializer,
    PricingRuleSerializer,
)
from modules.pricing.services import PricingRuleService


class PricingRuleViewSet(GenericViewSet):
    """Administrator CRUD over the rule catalog.

    Uses ``PricingRuleService`` with ``PricingRuleDjangoRepository`` (DIP).
    """

    queryset = PricingRule.objects.all()
    serializer_class = PricingRuleSerializer
    permission_classes = [IsAdminUser]
    filterset_class = PricingRuleFilter
    search_fields = ["name", "display_name", "applies_to"]
    ordering_fields = ["category", "display_order", "priority", "name"]
    ordering = ["category", "display_order"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = PricingRuleService(repository=PricingRuleDjangoRepository())

    def get_permissions(self):
        if self.action == "grouped":
            return [IsAuthenticated()]
        return super().get_permissions()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/pricing/rules/"""
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = PricingRuleSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/pricing/rules/{pk}/"""
        rule = self._service.get_rule(pk)
        return Response(PricingRuleSerializer(rule).data)

    @action(detail=False, methods=["get"])
    def grouped(self, request: Request) -> Response:
        """GET /api/v1/pricing/rules/grouped/

        Active rules grouped by category, for building order forms.
        """
        return Response(self._service.grouped_active_rules())

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    @extend_schema(request=PricingRuleInputSerializer, responses=PricingRuleSerializer)
    def create(self, request: Request) -> Response:
        """POST /api/v1/pricing/rules/"""
        serializer = PricingRuleInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rule = self._service.create_rule(
            CreatePricingRuleDTO(**serializer.validated_data)
        )
        return Response(PricingRuleSerializer(rule).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PricingRuleInputSerializer, responses=PricingRuleSerializer)
    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/pricing/rules/{pk}/"""
        return self._update(request, pk, partial=False)

    @extend_schema(request=PricingRuleInputSerializer, responses=PricingRuleSerializer)
    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/pricing/rules/{pk}/"""
        return self._update(request, pk, partial=True)

    def _update(self, request: Request, pk: str | None, partial: bool) -> Response:
        serializer = PricingRuleInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        rule = self._service.update_rule(
            pk, UpdatePricingRuleDTO(**serializer.validated_data)
        )
        return Response(PricingRuleSerializer(rule).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/pricing/rules/{pk}/"""
        self._service.delete_rule(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"])
    def seed(self, request: Request) -> Response:
        """POST /api/v1/pricing/rules/seed/

        Replaces the whole catalog with the default rule set.
        """
        rules = self._service.seed_defaults()
        return Response(
            {"count": len(rules), "results": PricingRuleSerializer(rules, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class PriceCalculationView(APIView):
    """POST /api/v1/pricing/calculate/: public, side-effect-free price preview."""

    permission_classes = [AllowAny]
    throttle_scope = "price_preview"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._engine = PricingEngine(PricingRuleDjangoRepository())

    @extend_schema(request=PriceQuoteRequestSerializer, responses=PriceQuoteSerializer)
    def post(self, request: Request) -> Response:
        serializer = PriceQuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        quote = quote_order(self._engine, PriceQuoteRequestDTO(**serializer.validated_data))
        return Response(PriceQuoteSerializer(quote).data)
