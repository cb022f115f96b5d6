"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Each
one subclasses a shared error kind, so the API exception handler maps
it to an HTTP status by its ``code``.
"""

from __future__ import annotations

from shared.domain.exceptions import (
    BusinessValidationError,
    Conflict,
    Forbidden,
    IndexOutOfRange,
    NotFound,
)


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class OrderAccessDenied(Forbidden):
    """The actor may not view or change this order."""


class EmptyOrder(BusinessValidationError):
    """An order was requested without any items."""


class ProductNotFound(NotFound):
    """A product referenced by an order item does not exist."""


class InactiveProduct(BusinessValidationError):
    """A product referenced by an order item is no longer sold."""


class InvalidQuantity(BusinessValidationError):
    """The requested quantity is not one of the product's allowed quantities."""


class InvalidOrderStatus(BusinessValidationError):
    """The requested status is not a known order status."""


class ItemIndexOutOfRange(IndexOutOfRange):
    """The item index does not point to a line of the order."""


class OrderConflict(Conflict):
    """The order was modified by someone else since it was read."""


class OrderAmountTooLarge(BusinessValidationError):
    """A line subtotal or the order total exceeds the storable amount."""
