"""Accounts domain exceptions.

Raised by the Service Layer when business rules are violated.
The DRF exception handler translates them into HTTP responses
through their ``code``.
"""

from __future__ import annotations

from shared.domain.exceptions import (
    AlreadyExists,
    BusinessValidationError,
    NotAuthenticated,
    NotFound,
)


class UserAlreadyExists(AlreadyExists):
    """A user with the same e-mail is already registered."""


class UserNotFound(NotFound):
    """The requested user does not exist."""


class InvalidCredentials(NotAuthenticated):
    """E-mail / password pair rejected, or wrong current password."""


class InactiveAccount(NotAuthenticated):
    """The account has been deactivated."""


class CannotDeleteUser(BusinessValidationError):
    """Admins cannot delete themselves or other admins."""


class PasswordResetNotFound(NotFound):
    """The password-reset request does not exist."""


class PasswordResetAlreadyPending(BusinessValidationError):
    """The user already has a pending password-reset request."""


class PasswordResetAlreadyProcessed(BusinessValidationError):
    """The password-reset request was already completed or rejected."""
