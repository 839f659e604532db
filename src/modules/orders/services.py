"""Order service layer (Use Cases).

Orchestrates order creation, lifecycle transitions, field updates and
post-completion reviews.  Each write operation is one atomic unit of work,
and every mutation re-reads the order under a row lock before checking
its preconditions.

Precedence of checks on a mutation:
1. the order exists (``OrderNotFound``);
2. the actor owns it or is an administrator (``OrderAccessDenied``);
3. a status change on a terminal order is refused (``InvalidOrderStatus``);
4. the actor's capability allows the change (``StatusChangeForbidden`` /
   ``FieldChangeForbidden``);
5. setting the current status again is a no-op (no history entry).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

import structlog
from django.db import transaction
from django.utils import timezone

from modules.core.actors import Actor, Capability
from modules.core.exceptions import DomainValidationError
from modules.orders.constants import (
    UPDATABLE_FIELDS,
    VALID_TRANSITIONS,
    OrderStatus,
)
from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderReviewed,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    DeadlineNotInFuture,
    FieldChangeForbidden,
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderAlreadyReviewed,
    OrderNotFound,
    OrderNotReviewable,
    StatusChangeForbidden,
)
from modules.orders.numbering import OrderNumberPolicy
from modules.orders.quoting import quote_order

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import (
        AdminUpdateDTO,
        CreateOrderDTO,
        PriceQuoteRequestDTO,
        ReviewDTO,
        UpdateOrderDTO,
    )
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.pricing.engine import PriceQuote, PricingEngine

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives the order repository and the pricing engine via constructor
    injection (DIP).  ``clock`` and ``numbering`` are injectable so that
    deadline checks and order-number collisions can be tested directly.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        pricing_engine: PricingEngine,
        numbering: Optional[OrderNumberPolicy] = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._order_repo = order_repository
        self._pricing = pricing_engine
        self._numbering = numbering or OrderNumberPolicy()
        self._clock = clock

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def compute_price(self, dto: PriceQuoteRequestDTO) -> PriceQuote:
        """Side-effect-free price preview."""
        return quote_order(self._pricing, dto, now=self._clock())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO, actor: Actor) -> Order:
        """Create a ``pending`` order owned by ``actor``.

        Steps:
        1. Reject deadlines that are not strictly in the future.
        2. Derive urgency from the deadline, then price with it.
        3. Insert under a fresh order number, retrying on collision.
        4. Write the initial status history entry and ``OrderCreated``.

        Raises:
            DeadlineNotInFuture: ``dto.deadline`` is not after now.
            OrderCreationExhausted: every order-number attempt collided.
        """
        log = logger.bind(requester_id=actor.id)
        now = self._clock()
        if dto.deadline <= now:
            log.warning("order.deadline_in_past", deadline=dto.deadline.isoformat())
            raise DeadlineNotInFuture()

        # Urgency is derived from the deadline before pricing uses it.
        quote = quote_order(self._pricing, dto, now=now)
        urgency = quote.urgency

        data: Dict[str, Any] = {
            "requester_id": actor.id,
            "education_level": dto.education_level,
            "task_type": dto.task_type,
            "subject": dto.subject,
            "title": dto.title,
            "description": dto.description,
            "additional_instructions": dto.additional_instructions,
            "page_count": dto.page_count,
            "number_of_sources": dto.number_of_sources,
            "complexity_level": dto.complexity_level,
            "citation_style": dto.citation_style,
            "deadline": dto.deadline,
            "urgency": urgency,
            "base_price": quote.base_price,
            "total_price": quote.total_price,
            "currency": quote.currency,
            "status": OrderStatus.PENDING,
        }
        order = self._numbering.run(
            lambda number: self._order_repo.create(data, order_number=number)
        )

        self._order_repo.add_history(
            order,
            new_status=OrderStatus.PENDING,
            notes="Order created",
            changed_by_id=actor.id,
        )
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                order_number=order.order_number,
                requester_id=actor.id,
                total_price=str(order.total_price),
                urgency=str(urgency),
            )
        )
        self._order_repo.save(order)

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            urgency=str(urgency),
            total_price=str(order.total_price),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def transition_status(
        self,
        order_id: str,
        actor: Actor,
        new_status: str,
        note: str = "",
    ) -> Order:
        """Move an order to ``new_status`` if the actor's capability allows it.

        Raises:
            DomainValidationError: ``new_status`` is not a known status.
            OrderNotFound: order does not exist.
            OrderAccessDenied: actor is neither owner nor administrator.
            InvalidOrderStatus: order is completed or cancelled.
            StatusChangeForbidden: capability lacks the transition.
        """
        new_status = _parse_status(new_status)
        order, capability = self._load_for_update(order_id, actor)

        if self._apply_status(order, actor, capability, new_status, note):
            self._order_repo.save(order)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_admin_fields(
        self, order_id: str, actor: Actor, dto: AdminUpdateDTO
    ) -> Order:
        """Administrator update of ``status``, ``admin_notes`` and ``progress``.

        ``admin_notes`` and ``progress`` stay editable on terminal orders;
        only the status is locked there.

        Raises:
            OrderNotFound, OrderAccessDenied, InvalidOrderStatus,
            FieldChangeForbidden: actor is not an administrator.
        """
        order, capability = self._load_for_update(order_id, actor)
        if capability != Capability.ADMINISTRATOR:
            raise FieldChangeForbidden("Only administrators may update these fields.")

        self._apply_admin_update(order, actor, dto)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_order(self, order_id: str, actor: Actor, dto: UpdateOrderDTO) -> Order:
        """Generic update, dispatched by the actor's capability.

        Owners may cancel and overwrite ``additional_instructions``;
        administrators may set ``status``, ``admin_notes`` and ``progress``.
        Any other requested field is forbidden.
        """
        order, capability = self._load_for_update(order_id, actor)
        log = logger.bind(order_id=str(order.id), capability=str(capability))

        requested = dto.requested_fields()
        outside = requested - UPDATABLE_FIELDS[capability]
        if outside:
            log.warning("order.update_forbidden", fields=sorted(outside))
            raise FieldChangeForbidden(
                f"Not allowed to change: {', '.join(sorted(outside))}."
            )

        if capability == Capability.ADMINISTRATOR:
            self._apply_admin_update(order, actor, dto.to_admin_update())
            return self._order_repo.get_by_id(str(order.id)) or order

        changed = False
        if dto.status is not None:
            changed = self._apply_status(
                order, actor, capability, dto.status, dto.status_note
            )
        if dto.additional_instructions is not None:
            order.additional_instructions = dto.additional_instructions
            changed = True

        if changed:
            self._order_repo.save(order)
            log.info("order.updated", fields=sorted(requested))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def cancel_order(self, order_id: str, actor: Actor, reason: str = "") -> Order:
        """Cancel an order (owner or administrator).

        Raises:
            OrderNotFound, OrderAccessDenied,
            InvalidOrderStatus: already completed or cancelled.
        """
        order, capability = self._load_for_update(order_id, actor)
        self._apply_status(
            order,
            actor,
            capability,
            OrderStatus.CANCELLED,
            reason or "Order cancelled",
        )
        self._order_repo.save(order)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def submit_review(self, order_id: str, actor: Actor, dto: ReviewDTO) -> Order:
        """Rate a completed order; owner only, at most once.

        Does not touch the status history.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: actor is not the owner.
            OrderNotReviewable: order is not completed.
            OrderAlreadyReviewed: a rating already exists.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not actor.owns(order.requester_id):
            raise OrderAccessDenied("Only the requester may review this order.")

        log = logger.bind(order_id=str(order.id))
        if order.status != OrderStatus.COMPLETED:
            log.warning("order.review_not_allowed", status=order.status)
            raise OrderNotReviewable("Only completed orders can be reviewed.")
        if order.is_reviewed:
            log.warning("order.review_duplicate")
            raise OrderAlreadyReviewed("This order has already been reviewed.")

        order.rating = dto.rating
        order.review = dto.review
        order.reviewed_at = self._clock()
        order.add_domain_event(OrderReviewed(aggregate_id=order.id, rating=dto.rating))
        self._order_repo.save(order)

        log.info("order.reviewed", rating=dto.rating)
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str, actor: Actor) -> Order:
        """Retrieve a single order visible to ``actor``.

        Raises:
            OrderNotFound: if the order does not exist.
            OrderAccessDenied: if the actor may not see it.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        self._require_access(order, actor)
        return order

    def get_order_by_number(self, order_number: str, actor: Actor) -> Order:
        order = self._order_repo.get_by_order_number(order_number)
        if not order:
            raise OrderNotFound(f"Order {order_number} not found.")
        self._require_access(order, actor)
        return order

    def list_orders(
        self, actor: Actor, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet[Order]:
        """Orders visible to ``actor``, newest first.

        Requesters only ever see their own orders.
        """
        scoped = dict(filters or {})
        if not actor.is_admin:
            scoped["requester_id"] = actor.id
        return self._order_repo.list(scoped)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_for_update(self, order_id: str, actor: Actor) -> Tuple[Order, str]:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        capability = self._require_access(order, actor)
        return order, capability

    @staticmethod
    def _require_access(order: Order, actor: Actor) -> str:
        capability = actor.capability_for(order.requester_id)
        if capability is None:
            logger.warning(
                "order.access_denied", order_id=str(order.id), actor_id=actor.id
            )
            raise OrderAccessDenied("You do not have access to this order.")
        return capability

    def _apply_status(
        self,
        order: Order,
        actor: Actor,
        capability: str,
        new_status: str,
        note: str = "",
    ) -> bool:
        """Validate and apply a status change; return ``True`` if it changed.

        The status write and its history append happen in the caller's
        transaction; the caller persists the order.
        """
        old_status = order.status
        log = logger.bind(
            order_id=str(order.id),
            current_status=old_status,
            new_status=new_status,
            capability=str(capability),
        )

        if order.is_terminal:
            log.warning("order.terminal_transition")
            raise InvalidOrderStatus(
                f"Order is {old_status}; its status can no longer change."
            )
        if new_status == old_status:
            if capability == Capability.OWNER and new_status != OrderStatus.CANCELLED:
                raise StatusChangeForbidden("Owners may only cancel their orders.")
            log.info("order.status_unchanged")
            return False
        if new_status not in VALID_TRANSITIONS[capability][old_status]:
            log.warning("order.invalid_transition")
            raise StatusChangeForbidden(
                f"Cannot move order from {old_status} to {new_status}."
            )

        order.status = new_status
        self._order_repo.add_history(
            order,
            new_status=new_status,
            old_status=old_status,
            notes=note,
            changed_by_id=actor.id,
        )
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=str(old_status),
                new_status=str(new_status),
                changed_by=actor.id,
            )
        )
        if new_status == OrderStatus.CANCELLED:
            order.add_domain_event(
                OrderCancelled(aggregate_id=order.id, reason=note, cancelled_by=actor.id)
            )

        log.info("order.status_updated")
        return True

    def _apply_admin_update(
        self, order: Order, actor: Actor, dto: AdminUpdateDTO
    ) -> None:
        # Re-sending the current status leaves the order and its history alone.
        if dto.status is not None and dto.status != order.status:
            self._apply_status(
                order, actor, Capability.ADMINISTRATOR, dto.status, dto.status_note
            )
        if dto.admin_notes is not None:
            order.admin_notes = dto.admin_notes
        if dto.progress is not None:
            order.set_progress(dto.progress)

        self._order_repo.save(order)
        logger.info(
            "order.admin_updated",
            order_id=str(order.id),
            status=order.status,
            progress=order.progress,
        )


def _parse_status(value: str) -> str:
    if value not in OrderStatus.values:
        raise DomainValidationError(f"'{value}' is not a valid status.", field="status")
    return OrderStatus(value)
