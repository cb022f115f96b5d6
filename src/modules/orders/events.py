"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    total: Decimal = Decimal("0.00")
    item_count: int = 0


@dataclass(frozen=True)
class OrderItemRemoved(DomainEvent):
    """Raised when a line is removed from an order that still has lines."""

    index: int = 0
    total: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is destroyed (admin delete or last line removed)."""

    reason: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    previous_status: Optional[str] = None


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an administrator sets an order status."""

    old_status: Optional[str] = None
    new_status: Optional[str] = None
