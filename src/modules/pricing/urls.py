"""Pricing URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.pricing.views import PriceCalculationView, PricingRuleViewSet

router = DefaultRouter(trailing_slash=True)
router.register("pricing/rules", PricingRuleViewSet, basename="pricing-rule")

urlpatterns = [
    path(
        "pricing/calculate/",
        PriceCalculationView.as_view(),
        name="pricing-calculate",
    ),
    *router.urls,
]
