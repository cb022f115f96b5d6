"""Accounts repository interfaces."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import PasswordResetRequest, User


class IUserRepository(IRepository["User"]):
    """Repository contract for application users."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[User]":
        """List users, newest first."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by (case-insensitive) e-mail."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> User:
        """Create a user; ``data["password"]`` is the raw password."""


class IPasswordResetRepository(IRepository["PasswordResetRequest"]):
    """Repository contract for password-reset requests."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[PasswordResetRequest]":
        """List requests with the requesting user hydrated."""

    @abstractmethod
    def get_pending_for_user(self, user_id: str) -> Optional[PasswordResetRequest]:
        """Return the user's pending request, if any."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[PasswordResetRequest]:
        """Retrieve a request with a row-level lock."""
