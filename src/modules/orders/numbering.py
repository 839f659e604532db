"""Order number generation with a bounded collision-retry policy.

Numbers look like ``ORD-2605-004217``: year and month of generation plus
six random digits drawn independently for every attempt.  The database
unique constraint is the only arbiter of uniqueness; the policy retries
only when the insert failed because of that constraint.
"""

from __future__ import annotations

import secrets
from datetime import datetime
from typing import Callable, Optional, TypeVar

import structlog
from django.utils import timezone

from modules.orders.constants import (
    ORDER_NUMBER_MAX_ATTEMPTS,
    ORDER_NUMBER_PREFIX,
    ORDER_NUMBER_SPACE,
)
from modules.orders.exceptions import OrderCreationExhausted, OrderNumberCollision

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def generate_order_number(
    now: Optional[datetime] = None,
    randbelow: Callable[[int], int] = secrets.randbelow,
) -> str:
    """Return a candidate order number for the current month."""
    now = now or timezone.now()
    return f"{ORDER_NUMBER_PREFIX}-{now:%y%m}-{randbelow(ORDER_NUMBER_SPACE):06d}"


class OrderNumberPolicy:
    """Runs an insert with fresh order numbers until one sticks.

    ``persist`` receives a candidate number and must raise
    ``OrderNumberCollision`` only when the uniqueness constraint on
    ``order_number`` rejected it.  Any other exception propagates
    immediately without retry.
    """

    def __init__(
        self,
        generator: Callable[[], str] = generate_order_number,
        max_attempts: int = ORDER_NUMBER_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self._generate = generator
        self.max_attempts = max_attempts

    def run(self, persist: Callable[[str], T]) -> T:
        """Call ``persist`` with up to ``max_attempts`` distinct candidates.

        Raises:
            OrderCreationExhausted: every attempt collided.
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self._generate()
            try:
                return persist(candidate)
            except OrderNumberCollision:
                logger.warning(
                    "order.number_collision",
                    order_number=candidate,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                )

        logger.error("order.number_exhausted", attempts=self.max_attempts)
        raise OrderCreationExhausted(
            f"Could not allocate a unique order number after "
            f"{self.max_attempts} attempts."
        )
