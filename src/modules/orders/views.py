"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Views only
translate between HTTP and the service: they build the ``Actor`` and the
DTOs, and domain errors propagate to the standardized exception handler.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.actors import Actor
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import (
    CreateOrderDTO,
    PriceQuoteRequestDTO,
    ReviewDTO,
    UpdateOrderDTO,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    PriceQuoteRequestSerializer,
    ReviewSerializer,
    StatusTransitionSerializer,
    UpdateOrderSerializer,
)
from modules.orders.services import OrderService
from modules.pricing.engine import PricingEngine
from modules.pricing.repositories import PricingRuleDjangoRepository
from modules.pricing.serializers import PriceQuoteSerializer


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    search_fields = ["order_number", "title", "subject"]
    ordering_fields = ["created_at", "deadline", "total_price", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            pricing_engine=PricingEngine(PricingRuleDjangoRepository()),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttle scopes per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "by_number"}:
            throttle_scope = "order_listing"
        elif self.action == "calculate_price":
            throttle_scope = "price_preview"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def _actor(self, request: Request) -> Actor:
        return Actor.from_user(request.user)

    # ------------------------------------------------------------------
    # Create / Preview
    # ------------------------------------------------------------------

    @extend_schema(request=CreateOrderSerializer, responses={201: OrderSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.create_order(
            CreateOrderDTO(**serializer.validated_data),
            self._actor(request),
        )
        out = OrderSerializer(order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PriceQuoteRequestSerializer, responses=PriceQuoteSerializer)
    @action(detail=False, methods=["post"], url_path="calculate-price")
    def calculate_price(self, request: Request) -> Response:
        """POST /api/v1/orders/calculate-price/

        Price preview; nothing is persisted.
        """
        serializer = PriceQuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        quote = self._service.compute_price(
            PriceQuoteRequestDTO(**serializer.validated_data)
        )
        return Response(PriceQuoteSerializer(quote).data)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_orders(self._actor(self.request))

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Requesters see their own orders; administrators see all.
        Filtering, ordering and pagination are applied to that scope.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk, self._actor(request))
        return Response(OrderSerializer(order).data)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"number/(?P<order_number>[A-Za-z0-9-]+)",
    )
    def by_number(self, request: Request, order_number: str | None = None) -> Response:
        """GET /api/v1/orders/number/{order_number}/"""
        order = self._service.get_order_by_number(order_number, self._actor(request))
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    @extend_schema(request=UpdateOrderSerializer, responses=OrderSerializer)
    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Owners may cancel and edit ``additional_instructions``;
        administrators may set ``status``, ``admin_notes`` and ``progress``.
        """
        serializer = UpdateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.update_order(
            pk,
            self._actor(request),
            UpdateOrderDTO(**serializer.validated_data),
        )
        return Response(OrderSerializer(order).data)

    @extend_schema(request=StatusTransitionSerializer, responses=OrderSerializer)
    @action(detail=True, methods=["post"], url_path="status")
    def transition(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/status/"""
        serializer = StatusTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.transition_status(
            pk,
            self._actor(request),
            serializer.validated_data["status"],
            note=serializer.validated_data["note"],
        )
        return Response(OrderSerializer(order).data)

    @extend_schema(request=CancelOrderSerializer, responses=OrderSerializer)
    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.cancel_order(
            pk,
            self._actor(request),
            reason=serializer.validated_data["reason"],
        )
        return Response(OrderSerializer(order).data)

    @extend_schema(request=ReviewSerializer, responses=OrderSerializer)
    @action(detail=True, methods=["post"])
    def review(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/review/"""
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.submit_review(
            pk,
            self._actor(request),
            ReviewDTO(**serializer.validated_data),
        )
        return Response(OrderSerializer(order).data)
