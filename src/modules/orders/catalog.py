"""Catalog gateway used by the order builder.

Orders never query the products tables directly: they ask an
``ICatalogGateway`` for a ``ProductSnapshot``, a read-only copy of the
fields an order line needs.  ``ProductCatalogGateway`` adapts the
products module's repository to that interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Tuple
from uuid import UUID

if TYPE_CHECKING:
    from modules.products.repositories.interfaces import IProductRepository


@dataclass(frozen=True)
class ProductSnapshot:
    id: UUID
    reference: str
    name_en: str
    size: str
    price: Decimal
    is_active: bool
    allowed_quantities: Tuple[int, ...] = ()

    def accepts_quantity(self, quantity: int) -> bool:
        """An empty allowed set means any positive quantity."""
        return not self.allowed_quantities or quantity in self.allowed_quantities


class ICatalogGateway(ABC):
    """Read-only product lookup for order building."""

    @abstractmethod
    def get_product(self, product_id: UUID) -> Optional[ProductSnapshot]:
        """Return the snapshot for *product_id*, or ``None`` if absent."""


class ProductCatalogGateway(ICatalogGateway):
    """``ICatalogGateway`` backed by the products repository."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._products = product_repository

    def get_product(self, product_id: UUID) -> Optional[ProductSnapshot]:
        product = self._products.get_by_id(str(product_id))
        if product is None:
            return None
        return ProductSnapshot(
            id=product.id,
            reference=product.reference,
            name_en=product.name_en,
            size=product.size,
            price=Decimal(product.price),
            is_active=product.is_active,
            allowed_quantities=tuple(product.allowed_quantities or ()),
        )
