"""Domain error taxonomy and its translation into API responses.

Every failure raised by a service belongs to one of a small set of stable
kinds.  The API layer never inspects messages: it maps the kind to an HTTP
status and a machine-readable ``code``.

==========================  ======  =========================================
Kind                        Status  Meaning
==========================  ======  =========================================
``validation_failure``      400     Malformed or out-of-range input.
``forbidden``               403     Actor lacks the capability for the change.
``not_found``               404     Unknown order or pricing rule.
``conflict``                409     Request incompatible with current state.
``order_creation_exhausted`` 503    Order-number retries exhausted.
``unexpected``              500     Anything else (details never exposed).
==========================  ======  =========================================
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for every business-rule failure."""

    code = "unexpected"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DomainValidationError(DomainError):
    """Input is malformed or out of range (caller-fixable)."""

    code = "validation_failure"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(DomainError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(DomainError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class DomainAPIException(exceptions.APIException):
    """APIException carrying the status and code of a ``DomainError``."""

    def __init__(self, detail: str, code: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(detail=detail, code=code)


def to_api_exception(exc: DomainError) -> exceptions.APIException:
    """Translate a domain error into the DRF exception rendered to clients."""
    if isinstance(exc, DomainValidationError):
        field = exc.field or "non_field_errors"
        return exceptions.ValidationError({field: [str(exc)]}, code=exc.code)
    if type(exc).code == DomainError.code:
        # Unclassified domain failures are reported without internal detail.
        return exceptions.APIException()
    return DomainAPIException(str(exc), exc.code, exc.status_code)


def _pydantic_to_api_exception(exc: PydanticValidationError) -> exceptions.ValidationError:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "non_field_errors"
        message = str(error.get("msg", "Invalid value.")).removeprefix("Value error, ")
        errors.setdefault(field, []).append(message)
    return exceptions.ValidationError(errors, code="validation_failure")


class DomainExceptionHandler(ExceptionHandler):
    """Standardized-errors handler aware of ``DomainError`` and pydantic DTOs."""

    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, DomainError):
            logger.info(
                "api.domain_error",
                error_code=exc.code,
                error_type=type(exc).__name__,
            )
            return to_api_exception(exc)
        if isinstance(exc, PydanticValidationError):
            return _pydantic_to_api_exception(exc)
        return super().convert_known_exceptions(exc)

    def report_exception(self, exc: exceptions.APIException, response: Any) -> None:
        if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "api.unhandled_error",
                error_type=type(self.exc).__name__,
                status_code=response.status_code,
                exc_info=self.exc,
            )
        super().report_exception(exc, response)
