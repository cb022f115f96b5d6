"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Q

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Product]":
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_active": True}
            {"name_en__icontains": "primer"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_by_reference(
        self, reference: str, active_only: bool = False
    ) -> Optional[Product]:
        queryset = Product.objects.filter(reference=reference.strip().upper())
        if active_only:
            queryset = queryset.filter(is_active=True)
        return queryset.first()

    def search(self, query: str) -> "models.QuerySet[Product]":
        return Product.objects.filter(
            Q(reference__icontains=query)
            | Q(name_en__icontains=query)
            | Q(name_fr__icontains=query),
            is_active=True,
        )

    def list_by_references(self, references: Iterable[str]) -> "models.QuerySet[Product]":
        return Product.objects.filter(
            reference__in=[ref.upper() for ref in references],
            is_active=True,
        )

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            reference=entity.reference,
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Deactivate a product by ID.

        Order lines keep referencing deactivated products, so products
        are never removed from the table.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.is_active = False
        product.save(update_fields=["is_active"])
        logger.info("product.deactivated", product_id=str(id))
        return True
