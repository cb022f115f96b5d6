"""Product domain exceptions.

Raised by the Service Layer when business rules are violated and
translated into HTTP responses by the API exception handler.
"""

from __future__ import annotations

from shared.domain.exceptions import AlreadyExists, NotFound


class ProductAlreadyExists(AlreadyExists):
    """A product with the same reference already exists."""


class ProductNotFound(NotFound):
    """The requested product does not exist (or is not visible)."""
