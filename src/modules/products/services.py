"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Reference must be unique (also when renaming).
- Customers only see active products.
- Deletion deactivates the product.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from django.db import models

    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = (
    "name_en",
    "name_fr",
    "price",
    "size",
    "color",
    "allowed_quantities",
    "related_products",
    "is_active",
)


class ProductService:
    """Application service for catalog use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product.

        Raises:
            ProductAlreadyExists: if the reference is already taken.
        """
        log = logger.bind(reference=dto.reference)

        if self._repo.get_by_reference(dto.reference):
            log.warning("product.duplicate_reference")
            raise ProductAlreadyExists(
                f"Product with reference '{dto.reference}' already exists."
            )

        product = Product(
            reference=dto.reference,
            name_en=dto.name_en,
            name_fr=dto.name_fr,
            price=dto.price,
            size=dto.size,
            color=dto.color,
            allowed_quantities=list(dto.allowed_quantities),
            related_products=list(dto.related_products),
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return self._apply_update(product, dto)

    @transaction.atomic
    def update_product_by_reference(self, reference: str, dto: UpdateProductDTO) -> Product:
        """Update a product located by reference; may rename it.

        Raises:
            ProductNotFound: no product with this reference.
            ProductAlreadyExists: ``new_reference`` is taken.
        """
        product = self._repo.get_by_reference(reference)
        if not product:
            raise ProductNotFound(f"Product {reference.upper()} not found.")

        if dto.new_reference and dto.new_reference != product.reference:
            if self._repo.get_by_reference(dto.new_reference):
                raise ProductAlreadyExists(
                    f"Product with reference '{dto.new_reference}' already exists."
                )
            product.reference = dto.new_reference

        return self._apply_update(product, dto)

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Deactivate a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """Return products, optionally filtered."""
        return self._repo.list(filters)

    def list_active_products(self) -> "models.QuerySet[Product]":
        return self._repo.list({"is_active": True})

    def search_products(self, query: str) -> "models.QuerySet[Product] | list[Product]":
        """Search active products; a blank query yields no results."""
        query = (query or "").strip()
        if not query:
            return []
        return self._repo.search(query)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.retrieved", product_id=str(id))
        return product

    def get_product_by_reference(self, reference: str) -> Product:
        """Retrieve an *active* product by reference."""
        product = self._repo.get_by_reference(reference, active_only=True)
        if not product:
            raise ProductNotFound(f"Product {reference.upper()} not found.")
        return product

    def get_related_products(self, id: str) -> "models.QuerySet[Product] | list[Product]":
        product = self.get_product(id)
        if not product.related_products:
            return []
        return self._repo.list_by_references(product.related_products)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_update(self, product: Product, dto: UpdateProductDTO) -> Product:
        log = logger.bind(product_id=str(product.id))
        for field in _UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)
        product = self._repo.save(product)
        log.info("product.updated")
        return product
