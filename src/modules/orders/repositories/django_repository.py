"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems) is persisted atomically.

Concurrency control combines ``select_for_update()`` on reads that
precede a write with a ``version`` compare-and-set on update.  Domain
events collected on the aggregate are published on the in-process bus
once the surrounding transaction commits.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone

from modules.orders.exceptions import OrderConflict
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` keys:
        - ``owner_id`` (required)
        - ``items`` (required): list of dicts with ``product_id``,
          ``reference``, ``name``, ``size``, ``quantity``, ``unit_price``
        - ``notes`` (optional)
        """
        order = Order(owner_id=data["owner_id"], notes=data.get("notes", ""))
        order.save()

        items = []
        for position, item_data in enumerate(data.get("items", [])):
            item = OrderItem(order=order, position=position, **item_data)
            item.save()
            items.append(item)

        order.recalculate_total(items)
        order.save(update_fields=["total"])

        log = logger.bind(order_id=str(order.id), item_count=len(items))
        log.info("order.persisted")
        return order

    # ------------------------------------------------------------------
    # Update (compare-and-set on version)
    # ------------------------------------------------------------------

    @transaction.atomic
    def update(self, order: Order, expected_version: int) -> Order:
        """Write status, total and notes if nobody else bumped the version."""
        updated = Order.objects.filter(id=order.id, version=expected_version).update(
            status=order.status,
            total=order.total,
            notes=order.notes,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            logger.warning(
                "order.version_conflict",
                order_id=str(order.id),
                expected_version=expected_version,
            )
            raise OrderConflict(
                f"Order {order.id} was modified concurrently; reload and retry."
            )

        order.version = expected_version + 1
        self._publish(order)
        logger.info("order.updated", order_id=str(order.id), version=order.version)
        return order

    @transaction.atomic
    def remove_item(self, order: Order, index: int) -> None:
        """Delete the line at *index* (positional, in ``position`` order)."""
        item = list(order.items.all())[index]
        OrderItem.objects.filter(id=item.id).delete()
        logger.info(
            "order.item_deleted",
            order_id=str(order.id),
            item_id=str(item.id),
            index=index,
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the owner FK (single JOIN) and
        ``prefetch_related`` for items (one batched query).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("owner")
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Items are prefetched so the caller can work on them while the
        row is locked.  Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update()
                .select_related("owner")
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Order]":
        """List orders with optional filters and eager-loaded relations.

        Supported filter keys include ``status`` and ``owner_id``.
        """
        queryset = Order.objects.select_related("owner").prefetch_related("items")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order without a version check."""
        entity.save()
        self._publish(entity)
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def destroy(self, order: Order) -> None:
        order_id = order.id
        Order.objects.filter(id=order_id).delete()
        self._publish(order)
        logger.info("order.deleted", order_id=str(order_id))

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete an order and its items by ID."""
        order = self.get_by_id(id)
        if not order:
            return False
        self.destroy(order)
        return True

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @staticmethod
    def _publish(order: Order) -> None:
        events = order.pull_domain_events()
        if events:
            transaction.on_commit(lambda: event_bus.publish_all(events))
