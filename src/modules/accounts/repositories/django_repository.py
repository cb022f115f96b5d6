"""Django ORM implementations of the accounts repositories.

Methods return ``None`` for missing rows instead of raising; the
Service Layer decides how to translate a missing entity.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.accounts.models import PasswordResetRequest, ResetRequestStatus, User
from modules.accounts.repositories.interfaces import (
    IPasswordResetRepository,
    IUserRepository,
)

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    """Concrete User repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[User]:
        try:
            return User.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_email(self, email: str) -> Optional[User]:
        return User.objects.filter(email__iexact=email.strip()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[User]":
        queryset = User.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> User:
        fields = dict(data)
        password = fields.pop("password")
        user = User.objects.create_user(password=password, **fields)
        logger.info("user.created", user_id=str(user.id), role=user.role)
        return user

    @transaction.atomic
    def save(self, entity: User) -> User:
        entity.save()
        logger.info("user.saved", user_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        user = self.get_by_id(id)
        if not user:
            return False
        user.delete()
        logger.info("user.deleted", user_id=str(id))
        return True


class PasswordResetDjangoRepository(IPasswordResetRepository):
    """Concrete PasswordResetRequest repository backed by Django ORM.

    The requesting user is joined on every read (``select_related``) so
    the API can display who asked for the reset without extra queries.
    """

    def _queryset(self) -> "models.QuerySet[PasswordResetRequest]":
        return PasswordResetRequest.objects.select_related("user", "completed_by")

    def get_by_id(self, id: str) -> Optional[PasswordResetRequest]:
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[PasswordResetRequest]:
        try:
            return (
                PasswordResetRequest.objects.select_for_update()
                .select_related("user")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_pending_for_user(self, user_id: str) -> Optional[PasswordResetRequest]:
        return self._queryset().filter(
            user_id=user_id, status=ResetRequestStatus.PENDING
        ).first()

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[PasswordResetRequest]":
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: PasswordResetRequest) -> PasswordResetRequest:
        entity.save()
        logger.info(
            "password_reset.saved",
            request_id=str(entity.id),
            status=entity.status,
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        request = self.get_by_id(id)
        if not request:
            return False
        request.delete()
        return True
