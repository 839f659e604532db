"""Order persistence: the service-facing contract and its ORM implementation."""

from modules.orders.repositories.django_repository import (
    OUTBOX_TOPIC,
    OrderDjangoRepository,
)
from modules.orders.repositories.interfaces import IOrderRepository

__all__ = ["OUTBOX_TOPIC", "IOrderRepository", "OrderDjangoRepository"]
