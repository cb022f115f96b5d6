"""Order and OrderItem models.

Business rules implemented:
- An order belongs to the user who placed it; deleting the user
  deletes their orders.
- OrderItem snapshots reference, name, size and price at creation time;
  later catalog changes never touch existing lines.
- OrderItem subtotal is always ``quantity * unit_price`` (calculated on save).
- Order total is always the sum of its line subtotals.
- ``version`` is a revision counter used for compare-and-set updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import MONEY_QUANTUM, VALID_TRANSITIONS, OrderStatus
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


def compute_total(subtotals: Iterable[Decimal]) -> Decimal:
    """Sum line subtotals, rounded to cents."""
    return sum(subtotals, Decimal("0.00")).quantize(Decimal(MONEY_QUANTUM))


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    Lines are kept in ``position`` order, which is the order the customer
    listed them in the cart.  Positional item indexes used by the API refer
    to that sequence.
    """

    owner: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    notes: models.TextField = models.TextField(blank=True, default="")
    version: models.PositiveIntegerField = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["owner", "-created_at"], name="orders_owner_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name="orders_total_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def recalculate_total(self, items: Iterable[OrderItem]) -> Decimal:
        self.total = compute_total(item.subtotal for item in items)
        return self.total

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Order line with a snapshot of the product as it was when ordered.

    ``product`` is kept for traceability; the snapshot fields are what the
    order displays and totals.  Products are deactivated rather than
    deleted, so PROTECT never blocks normal catalog maintenance.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    position: models.PositiveIntegerField = models.PositiveIntegerField()
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    reference: models.CharField = models.CharField(max_length=64)
    name: models.CharField = models.CharField(max_length=255)
    size: models.CharField = models.CharField(max_length=20)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = (Decimal(self.unit_price) * self.quantity).quantize(
            Decimal(MONEY_QUANTUM)
        )
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.reference} x{self.quantity} (${self.subtotal})"
