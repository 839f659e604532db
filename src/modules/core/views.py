import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.actors import Actor
from modules.core.models import OutboxEvent

logger = structlog.get_logger()

_CACHE_CHECK_KEY = "health:check"


def _ping_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _ping_cache() -> None:
    cache.set(_CACHE_CHECK_KEY, "ok", 10)
    if cache.get(_CACHE_CHECK_KEY) != "ok":
        raise ConnectionError("cache round trip returned a stale value")


def _check_service(name: str, ping: Callable[[], None]) -> Dict[str, Any]:
    started = time.monotonic()
    try:
        ping()
    except Exception:
        logger.exception("health_check.service_down", service=name)
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - started) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness plus backing-service reachability; 503 when any service is down."""
    services = {
        "database": _check_service("database", _ping_database),
        "cache": _check_service("cache", _ping_cache),
    }
    healthy = all(entry["status"] == "up" for entry in services.values())

    body: Dict[str, Any] = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": timezone.now().isoformat(),
        "services": services,
    }
    if services["database"]["status"] == "up":
        body["outbox_backlog"] = OutboxEvent.objects.backlog()

    logger.info("health_check.completed", status=body["status"])
    return JsonResponse(body, status=200 if healthy else 503)


class MeView(APIView):
    """Return the caller's identity and role as resolved by the API.

    * No token  -> 401
    * Bad token -> 401
    * Valid JWT -> 200 with ``id`` / ``username`` / ``role``
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        actor = Actor.from_user(request.user)
        return Response(
            {
                "id": actor.id,
                "username": request.user.get_username(),
                "role": actor.role,
            }
        )
