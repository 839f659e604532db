import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_META_KEY = "HTTP_X_REQUEST_ID"
_MAX_REQUEST_ID_LENGTH = 128

logger = structlog.get_logger()


def _request_id_from(request: HttpRequest) -> str:
    supplied = request.META.get(_REQUEST_ID_META_KEY, "").strip()
    if supplied and len(supplied) <= _MAX_REQUEST_ID_LENGTH:
        return supplied
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Tags every log line of a request with one ``correlation_id``.

    A caller-supplied ``X-Request-ID`` is reused (oversized values are
    replaced); otherwise a UUID4 is minted.  The id is echoed back on the
    response so API clients can quote it when reporting an order problem.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = _request_id_from(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=request_id)

        path = request.get_full_path()
        logger.info("request_started", method=request.method, path=path)
        started = time.monotonic()

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )
        response[REQUEST_ID_HEADER] = request_id
        return response
