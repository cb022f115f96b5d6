"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups the catalog needs:
unique reference, free-text search and related products.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional filters."""

    @abstractmethod
    def get_by_reference(
        self, reference: str, active_only: bool = False
    ) -> Optional[Product]:
        """Retrieve a product by reference (case-insensitive)."""

    @abstractmethod
    def search(self, query: str) -> "models.QuerySet[Product]":
        """Active products whose reference or names contain *query*."""

    @abstractmethod
    def list_by_references(self, references: Iterable[str]) -> "models.QuerySet[Product]":
        """Active products whose reference is in *references*."""
