"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the Order aggregate
needs: atomic creation under a caller-chosen order number, row-locked
reads for mutations, and the append-only status history.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes its ``OrderStatusHistory`` rows.  Mutations
    must be atomic: a status write and its history append commit together.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any], order_number: str) -> Order:
        """Insert a new order carrying ``order_number``.

        Raises:
            OrderNumberCollision: only when the ``order_number`` uniqueness
                constraint rejected the insert.  Other failures propagate
                unchanged.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock until commit."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Optional[Order]:
        """Retrieve an order by its human-readable number."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[Order]:
        """List orders newest first, with optional field filters."""

    @abstractmethod
    def add_history(
        self,
        order: Order,
        new_status: str,
        old_status: Optional[str] = None,
        notes: str = "",
        changed_by_id: Optional[Any] = None,
    ) -> OrderStatusHistory:
        """Append one entry to the order's status history."""
