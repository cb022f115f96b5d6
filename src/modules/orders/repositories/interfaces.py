"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the Order aggregate
needs: atomic creation with items, locked reads, and versioned
compare-and-set updates.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Mutations
    must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` must include ``owner_id`` and ``items`` (list of dicts
        with ``product_id``, ``reference``, ``name``, ``size``,
        ``quantity``, ``unit_price``), and optionally ``notes``.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its owner and items loaded."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Order]":
        """List orders with optional filters."""

    @abstractmethod
    def update(self, order: Order, expected_version: int) -> Order:
        """Persist status, total and notes if the stored version matches.

        Raises:
            OrderConflict: the stored version differs from
                ``expected_version``.
        """

    @abstractmethod
    def remove_item(self, order: Order, index: int) -> None:
        """Delete the line at *index* of the (loaded) order."""

    @abstractmethod
    def destroy(self, order: Order) -> None:
        """Delete a loaded order and its items."""
