"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderItemRemoved,
    OrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            actor_id=str(event.actor_id),
            total=str(event.total),
            item_count=event.item_count,
        )


class OrderItemRemovedHandler(IEventHandler[OrderItemRemoved]):
    def handle(self, event: OrderItemRemoved) -> None:
        logger.info(
            "order.event.item_removed",
            order_id=str(event.aggregate_id),
            actor_id=str(event.actor_id),
            index=event.index,
            total=str(event.total),
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        logger.info(
            "order.event.deleted",
            order_id=str(event.aggregate_id),
            actor_id=str(event.actor_id),
            reason=event.reason,
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            actor_id=str(event.actor_id),
            previous_status=event.previous_status,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            actor_id=str(event.actor_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


order_created_handler = OrderCreatedHandler()
order_item_removed_handler = OrderItemRemovedHandler()
order_deleted_handler = OrderDeletedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()
