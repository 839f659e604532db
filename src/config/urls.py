"""Root URL map.

``/health`` and ``/api/v1/me`` come from core; orders and pricing share the
versioned ``/api/v1/`` prefix.  Tokens are issued by SimpleJWT and the
OpenAPI schema is public.
"""

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from django.contrib import admin
from django.urls import include, path
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

API_PREFIX = "api/v1/"

auth_patterns = [
    path("token/", TokenObtainPairView.as_view(), name="token_obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("token/verify/", TokenVerifyView.as_view(), name="token_verify"),
]

schema_patterns = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("modules.core.urls")),
    path(API_PREFIX, include("modules.orders.urls")),
    path(API_PREFIX, include("modules.pricing.urls")),
    path(f"{API_PREFIX}auth/", include(auth_patterns)),
    path("api/", include(schema_patterns)),
]
