"""Paint product catalog model.

Business rules implemented:
- ``reference`` is unique and normalised to uppercase.
- Price cannot be negative.
- ``allowed_quantities`` lists the only quantities a product can be
  ordered in; an empty list means any quantity is accepted.
- ``related_products`` holds references of complementary products.
- Products are never physically deleted: deletion flips ``is_active``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)

DEFAULT_SIZE = "1L"
DEFAULT_ALLOWED_QUANTITIES = (1, 5, 10, 20)


def default_allowed_quantities() -> List[int]:
    return list(DEFAULT_ALLOWED_QUANTITIES)


class Product(BaseModel):
    """Product aggregate root."""

    reference = models.CharField(max_length=64, unique=True)
    name_en = models.CharField(max_length=255)
    name_fr = models.CharField(max_length=255)
    size = models.CharField(max_length=20, default=DEFAULT_SIZE)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    color = models.CharField(max_length=32, blank=True, default="")
    allowed_quantities = models.JSONField(default=default_allowed_quantities, blank=True)
    related_products = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["reference"]
        indexes = [
            models.Index(fields=["is_active"], name="products_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.reference:
            self.reference = self.reference.strip().upper()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.reference:
            self.reference = self.reference.strip().upper()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                reference=self.reference,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.reference} - {self.name_en}"
