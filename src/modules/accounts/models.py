"""User and PasswordResetRequest models.

Business rules implemented:
- E-mail is the login identifier and must be unique (normalised to lowercase).
- Roles are ``user`` (customer) and ``admin``.
- A user may hold at most one *pending* password-reset request
  (enforced at service layer).
- Reset requests are processed (completed / rejected) by an admin and
  keep track of who processed them and when.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class UserRole(models.TextChoices):
    USER = "user", "User"
    ADMIN = "admin", "Admin"


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields: Any,
    ) -> "User":
        if not email:
            raise ValueError("Email is required.")
        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields: Any,
    ) -> "User":
        extra_fields.setdefault("role", UserRole.ADMIN)
        return self.create_user(email, password, **extra_fields)


class User(BaseModel, AbstractBaseUser):
    """Application user (customer or administrator)."""

    name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.USER,
    )
    is_active = models.BooleanField(default=True)
    password_reset_requested = models.BooleanField(default=False)
    password_reset_requested_at = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        db_table = "users"
        ordering = ["-created_at"]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    # Django admin site integration
    @property
    def is_staff(self) -> bool:
        return self.is_admin

    def has_perm(self, perm: str, obj: Any = None) -> bool:
        return self.is_active and self.is_admin

    def has_module_perms(self, app_label: str) -> bool:
        return self.is_active and self.is_admin

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class ResetRequestStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    REJECTED = "rejected", "Rejected"


class PasswordResetRequest(BaseModel):
    """A customer's request for an admin-assisted password reset."""

    user = models.ForeignKey(
        "accounts.User",
        on_delete=models.CASCADE,
        related_name="password_reset_requests",
    )
    status = models.CharField(
        max_length=10,
        choices=ResetRequestStatus.choices,
        default=ResetRequestStatus.PENDING,
    )
    completed_by = models.ForeignKey(
        "accounts.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "password_reset_requests"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="pwd_reset_status_idx"),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == ResetRequestStatus.PENDING

    def __str__(self) -> str:
        return f"{self.user_id} [{self.status}]"
