"""Base domain error kinds shared by every bounded context.

Each error carries a stable ``code`` so the API layer can translate it
into an HTTP response without knowing the concrete exception class.
Module-level exceptions (``modules.orders.exceptions`` etc.) subclass
one of these kinds.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business rule violations."""

    code: str = "error"


class NotFound(DomainError):
    """The requested entity does not exist."""

    code = "not_found"


class Forbidden(DomainError):
    """The actor is not allowed to perform the operation."""

    code = "forbidden"


class BusinessValidationError(DomainError):
    """The request is well-formed but violates a business rule."""

    code = "validation_error"


class IndexOutOfRange(DomainError):
    """A positional reference does not point to an existing element."""

    code = "index_out_of_range"


class Conflict(DomainError):
    """A concurrent modification was detected."""

    code = "conflict"


class AlreadyExists(DomainError):
    """A uniqueness rule was violated."""

    code = "already_exists"


class NotAuthenticated(DomainError):
    """Credentials were rejected."""

    code = "not_authenticated"
