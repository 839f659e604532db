"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
belongs to a kind from ``modules.core.exceptions``; the API layer maps
the kind to a status code and a stable error ``code``.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import (
    ConflictError,
    DomainError,
    DomainValidationError,
    ForbiddenError,
    NotFoundError,
)


class OrderNotFound(NotFoundError):
    """The requested order does not exist."""


class OrderAccessDenied(ForbiddenError):
    """The actor neither owns the order nor administers the system."""


class StatusChangeForbidden(ForbiddenError):
    """The actor's capability does not include the requested transition."""


class FieldChangeForbidden(ForbiddenError):
    """The update touches a field outside the actor's capability."""


class InvalidOrderStatus(ConflictError):
    """The order is in a terminal state and cannot change status."""


class OrderNotReviewable(ConflictError):
    """Reviews are only accepted on completed orders."""


class OrderAlreadyReviewed(ConflictError):
    """Rating and review are write-once."""


class DeadlineNotInFuture(DomainValidationError):
    def __init__(self, message: str = "Deadline must be in the future.") -> None:
        super().__init__(message, field="deadline")


class OrderNumberCollision(Exception):
    """The insert was rejected by the ``order_number`` uniqueness constraint."""

    def __init__(self, order_number: str) -> None:
        super().__init__(f"Order number {order_number} is already taken.")
        self.order_number = order_number


class OrderCreationExhausted(DomainError):
    """Every order-number attempt collided; the caller may retry later."""

    code = "order_creation_exhausted"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
