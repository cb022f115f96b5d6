"""Order service layer (Use Cases).

Orchestrates the order lifecycle: building an order from a cart,
removing lines, cancelling, changing status and deleting.  All write
operations are atomic; the service defines the unit-of-work boundary.

Business rules enforced:
- A cart must hold at least one item.
- Every product must exist, be active and accept the requested quantity.
- No line subtotal or order total may exceed what the money columns store.
- Lines snapshot the product (reference, name, size, price).
- ``total`` always equals the sum of line subtotals.
- Removing the last line deletes the order.
- Only administrators change status or delete orders; owners may remove
  lines and cancel while the order is pending.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.constants import MAX_ORDER_AMOUNT, MONEY_QUANTUM, OrderStatus
from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderItemRemoved,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    EmptyOrder,
    InactiveProduct,
    InvalidOrderStatus,
    InvalidQuantity,
    ItemIndexOutOfRange,
    OrderAmountTooLarge,
    OrderConflict,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import compute_total
from modules.orders.policies import OrderAccessPolicy

if TYPE_CHECKING:
    from django.db import models

    from modules.orders.catalog import ICatalogGateway
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.actor import Actor

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RemovalOutcome:
    """Result of ``remove_item``: the updated order, or ``deleted=True``."""

    order: Optional[Order]
    deleted: bool = False


class OrderService:
    """Application service for Order use-cases.

    Receives the order repository and the catalog gateway via
    constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog_gateway: ICatalogGateway,
        policy: Optional[OrderAccessPolicy] = None,
    ) -> None:
        self._order_repo = order_repository
        self._catalog = catalog_gateway
        self._policy = policy or OrderAccessPolicy()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO, actor: Actor) -> Order:
        """Build and persist an order from a cart.

        Items are validated in input order; the first failing item aborts
        the call and nothing is written.

        Raises:
            EmptyOrder: the cart has no items.
            ProductNotFound: a product does not exist.
            InactiveProduct: a product is no longer sold.
            InvalidQuantity: a quantity is outside the product's allowed set.
            OrderAmountTooLarge: a subtotal or the total cannot be stored.
        """
        log = logger.bind(actor_id=str(actor.requester_id))
        log.info("order.creation_started", item_count=len(dto.items))

        if not dto.items:
            raise EmptyOrder("Order must have at least one item.")

        max_amount = Decimal(MAX_ORDER_AMOUNT)
        running_total = Decimal("0.00")
        lines = []
        for item_dto in dto.items:
            product = self._catalog.get_product(item_dto.product_id)
            if product is None:
                raise ProductNotFound(f"Product {item_dto.product_id} not found.")
            if not product.is_active:
                raise InactiveProduct(
                    f"Product {product.reference} is no longer available."
                )
            if not product.accepts_quantity(item_dto.quantity):
                allowed = ", ".join(str(q) for q in product.allowed_quantities)
                log.warning(
                    "order.invalid_quantity",
                    product_id=str(product.id),
                    quantity=item_dto.quantity,
                )
                raise InvalidQuantity(
                    f"Invalid quantity {item_dto.quantity} for product "
                    f"{product.reference}. Allowed quantities: {allowed}."
                )

            subtotal = (product.price * item_dto.quantity).quantize(Decimal(MONEY_QUANTUM))
            running_total += subtotal
            if subtotal > max_amount or running_total > max_amount:
                log.warning(
                    "order.amount_too_large",
                    product_id=str(product.id),
                    quantity=item_dto.quantity,
                )
                raise OrderAmountTooLarge(
                    f"Order amount exceeds the maximum of {max_amount} "
                    f"at product {product.reference}."
                )

            lines.append(
                {
                    "product_id": product.id,
                    "reference": product.reference,
                    "name": product.name_en,
                    "size": product.size,
                    "quantity": item_dto.quantity,
                    "unit_price": product.price,
                }
            )

        order = self._order_repo.create(
            {
                "owner_id": actor.requester_id,
                "items": lines,
                "notes": dto.notes or "",
            }
        )
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                actor_id=actor.requester_id,
                total=order.total,
                item_count=len(lines),
            )
        )
        self._order_repo.save(order)

        log.info("order.created", order_id=str(order.id), total=str(order.total))

        # Re-fetch so the owner projection and items are loaded for output
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def remove_item(
        self,
        order_id: UUID | str,
        index: int,
        actor: Actor,
        expected_version: Optional[int] = None,
    ) -> RemovalOutcome:
        """Remove the line at *index*; delete the order if none remain.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: actor may not modify the order.
            OrderConflict: ``expected_version`` is stale.
            ItemIndexOutOfRange: *index* does not point to a line.
        """
        order = self._load_for_update(order_id)
        log = logger.bind(
            order_id=str(order.id),
            actor_id=str(actor.requester_id),
            index=index,
        )

        self._policy.ensure_can_modify(order, actor)
        self._check_version(order, expected_version)

        items = list(order.items.all())
        if index < 0 or index >= len(items):
            log.warning("order.item_index_out_of_range", item_count=len(items))
            raise ItemIndexOutOfRange(
                f"Item index {index} is out of range (order has {len(items)} items)."
            )

        self._order_repo.remove_item(order, index)
        remaining = items[:index] + items[index + 1 :]

        if not remaining:
            order.add_domain_event(
                OrderDeleted(
                    aggregate_id=order.id,
                    actor_id=actor.requester_id,
                    reason="no_items_remaining",
                )
            )
            self._order_repo.destroy(order)
            log.info("order.deleted_empty")
            return RemovalOutcome(order=None, deleted=True)

        order.total = compute_total(item.subtotal for item in remaining)
        order.add_domain_event(
            OrderItemRemoved(
                aggregate_id=order.id,
                actor_id=actor.requester_id,
                index=index,
                total=order.total,
            )
        )
        self._order_repo.update(order, order.version)

        log.info("order.item_removed", total=str(order.total))
        return RemovalOutcome(order=self._order_repo.get_by_id(str(order.id)))

    @transaction.atomic
    def cancel_order(
        self,
        order_id: UUID | str,
        actor: Actor,
        expected_version: Optional[int] = None,
    ) -> Order:
        """Set the order status to ``cancelled``; lines and total stay.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: actor may not modify the order.
            OrderConflict: ``expected_version`` is stale.
        """
        order = self._load_for_update(order_id)
        log = logger.bind(
            order_id=str(order.id),
            actor_id=str(actor.requester_id),
            current_status=order.status,
        )

        self._policy.ensure_can_modify(order, actor)
        self._check_version(order, expected_version)

        previous_status = order.status
        order.status = OrderStatus.CANCELLED
        order.add_domain_event(
            OrderCancelled(
                aggregate_id=order.id,
                actor_id=actor.requester_id,
                previous_status=previous_status,
            )
        )
        self._order_repo.update(order, order.version)

        log.info("order.cancelled")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(
        self,
        order_id: UUID | str,
        new_status: str,
        actor: Actor,
        expected_version: Optional[int] = None,
    ) -> Order:
        """Set the order status (administrators only).

        Every status is reachable from every status, including the
        current one.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: actor is not an administrator.
            InvalidOrderStatus: *new_status* is not a known status.
            OrderConflict: ``expected_version`` is stale.
        """
        order = self._load_for_update(order_id)
        log = logger.bind(
            order_id=str(order.id),
            actor_id=str(actor.requester_id),
            current_status=order.status,
            new_status=new_status,
        )

        self._policy.ensure_can_change_status(order, actor)

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_status")
            valid = ", ".join(OrderStatus.values)
            raise InvalidOrderStatus(
                f"Invalid status '{new_status}'. Valid statuses: {valid}."
            )

        self._check_version(order, expected_version)

        old_status = order.status
        order.status = new_status
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                actor_id=actor.requester_id,
                old_status=old_status,
                new_status=new_status,
            )
        )
        self._order_repo.update(order, order.version)

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: UUID | str, actor: Actor) -> None:
        """Delete an order and its lines (administrators only).

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: actor is not an administrator.
        """
        order = self._load_for_update(order_id)
        self._policy.ensure_can_delete(order, actor)

        order.add_domain_event(
            OrderDeleted(
                aggregate_id=order.id,
                actor_id=actor.requester_id,
                reason="admin_delete",
            )
        )
        self._order_repo.destroy(order)
        logger.info(
            "order.deleted",
            order_id=str(order.id),
            actor_id=str(actor.requester_id),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str, actor: Actor) -> Order:
        """Retrieve a single order visible to *actor*.

        Raises:
            OrderNotFound: if the order does not exist.
            OrderAccessDenied: if the actor neither owns it nor is admin.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        self._policy.ensure_can_view(order, actor)
        return order

    def list_orders(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """Return orders, optionally filtered."""
        return self._order_repo.list(filters)

    def list_orders_for(self, actor: Actor) -> "models.QuerySet[Order]":
        """Return the orders placed by *actor*."""
        return self._order_repo.list({"owner_id": actor.requester_id})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_for_update(self, order_id: UUID | str) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @staticmethod
    def _check_version(order: Order, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != order.version:
            logger.warning(
                "order.stale_version",
                order_id=str(order.id),
                expected_version=expected_version,
                current_version=order.version,
            )
            raise OrderConflict(
                f"Order {order.id} is at version {order.version}, "
                f"not {expected_version}; reload and retry."
            )
