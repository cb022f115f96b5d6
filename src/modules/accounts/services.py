"""Accounts service layer (Use Cases).

Business rules enforced:
- E-mail must be unique on registration.
- Deactivated accounts cannot log in.
- A user can hold a single pending password-reset request.
- Admins cannot delete themselves or other admins.
- Reset requests can only be processed once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.accounts.exceptions import (
    CannotDeleteUser,
    InactiveAccount,
    InvalidCredentials,
    PasswordResetAlreadyPending,
    PasswordResetAlreadyProcessed,
    PasswordResetNotFound,
    UserAlreadyExists,
    UserNotFound,
)
from modules.accounts.models import (
    PasswordResetRequest,
    ResetRequestStatus,
    User,
    UserRole,
)
from shared.domain.exceptions import Forbidden

if TYPE_CHECKING:
    from django.db import models

    from modules.accounts.dtos import (
        DeleteUserByEmailDTO,
        LoginDTO,
        ProcessPasswordResetDTO,
        RegisterUserDTO,
        UpdatePasswordDTO,
    )
    from modules.accounts.repositories.interfaces import (
        IPasswordResetRepository,
        IUserRepository,
    )
    from shared.domain.actor import Actor

logger = structlog.get_logger(__name__)


class AuthService:
    """Self-service account use-cases (register, login, passwords)."""

    def __init__(
        self,
        user_repository: IUserRepository,
        reset_repository: IPasswordResetRepository,
    ) -> None:
        self._user_repo = user_repository
        self._reset_repo = reset_repository

    @transaction.atomic
    def register(self, dto: RegisterUserDTO) -> User:
        """Create a customer account.

        Raises:
            UserAlreadyExists: the e-mail is already registered.
        """
        if self._user_repo.get_by_email(dto.email):
            logger.warning("auth.duplicate_email")
            raise UserAlreadyExists("User already exists with this email.")

        user = self._user_repo.create(
            {
                "name": dto.name,
                "email": dto.email,
                "password": dto.password,
                "role": UserRole.USER,
            }
        )
        logger.info("auth.registered", user_id=str(user.id))
        return user

    def login(self, dto: LoginDTO) -> User:
        """Check credentials and return the authenticated user.

        Raises:
            InvalidCredentials: unknown e-mail or wrong password.
            InactiveAccount: the account is deactivated.
        """
        user = self._user_repo.get_by_email(dto.email)
        if not user:
            raise InvalidCredentials("Invalid credentials.")
        if not user.is_active:
            logger.warning("auth.inactive_login", user_id=str(user.id))
            raise InactiveAccount("Account is deactivated.")
        if not user.check_password(dto.password):
            logger.warning("auth.invalid_password", user_id=str(user.id))
            raise InvalidCredentials("Invalid credentials.")

        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])
        logger.info("auth.logged_in", user_id=str(user.id))
        return user

    @transaction.atomic
    def update_password(self, user: User, dto: UpdatePasswordDTO) -> User:
        """Change the password of a logged-in user.

        Raises:
            InvalidCredentials: the current password is wrong.
        """
        if not user.check_password(dto.current_password):
            raise InvalidCredentials("Current password is incorrect.")
        user.set_password(dto.new_password)
        self._user_repo.save(user)
        logger.info("auth.password_updated", user_id=str(user.id))
        return user

    @transaction.atomic
    def request_password_reset(self, email: str) -> PasswordResetRequest:
        """Open an admin-assisted password-reset request.

        Raises:
            UserNotFound: no user with this e-mail.
            PasswordResetAlreadyPending: a request is already waiting.
        """
        user = self._user_repo.get_by_email(email)
        if not user:
            raise UserNotFound("No user found with this email.")
        if self._reset_repo.get_pending_for_user(str(user.id)):
            raise PasswordResetAlreadyPending("Password reset request already pending.")

        request = self._reset_repo.save(PasswordResetRequest(user=user))

        user.password_reset_requested = True
        user.password_reset_requested_at = timezone.now()
        self._user_repo.save(user)

        logger.info(
            "password_reset.requested",
            user_id=str(user.id),
            request_id=str(request.id),
        )
        return request


class UserAdminService:
    """Administrator use-cases over user accounts."""

    def __init__(self, user_repository: IUserRepository) -> None:
        self._user_repo = user_repository

    def list_users(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[User]":
        return self._user_repo.list(filters)

    def get_user(self, id: str) -> User:
        user = self._user_repo.get_by_id(id)
        if not user:
            raise UserNotFound("User not found.")
        return user

    @transaction.atomic
    def delete_user(self, id: str, actor: Actor) -> None:
        """Delete a customer account.

        Raises:
            UserNotFound: the user does not exist.
            CannotDeleteUser: self-deletion or target is an admin.
        """
        user = self.get_user(id)
        self._ensure_deletable(user, actor)
        self._user_repo.delete(str(user.id))
        logger.info("user.deleted_by_admin", user_id=str(user.id), actor_id=str(actor.requester_id))

    @transaction.atomic
    def delete_user_by_email(self, dto: DeleteUserByEmailDTO, actor: Actor) -> User:
        """Delete a customer account located by e-mail (and optionally name)."""
        user = self._user_repo.get_by_email(dto.email)
        if not user or (dto.name and user.name != dto.name):
            raise UserNotFound("User not found with provided email/name.")
        self._ensure_deletable(user, actor)
        self._user_repo.delete(str(user.id))
        logger.info("user.deleted_by_admin", user_id=str(user.id), actor_id=str(actor.requester_id))
        return user

    @staticmethod
    def _ensure_deletable(user: User, actor: Actor) -> None:
        if str(user.id) == str(actor.requester_id):
            raise CannotDeleteUser("You cannot delete your own account.")
        if user.is_admin:
            raise CannotDeleteUser("Cannot delete admin users.")


class PasswordResetService:
    """Administrator approval workflow for password-reset requests."""

    def __init__(
        self,
        reset_repository: IPasswordResetRepository,
        user_repository: IUserRepository,
    ) -> None:
        self._reset_repo = reset_repository
        self._user_repo = user_repository

    def list_requests(
        self, status: str = ResetRequestStatus.PENDING
    ) -> "models.QuerySet[PasswordResetRequest]":
        return self._reset_repo.list({"status": status})

    @transaction.atomic
    def complete(
        self, id: str, dto: ProcessPasswordResetDTO, actor: Actor
    ) -> PasswordResetRequest:
        """Set the new password and close the request as completed."""
        request = self._get_pending(id, actor)

        user = request.user
        user.set_password(dto.new_password)
        self._clear_reset_flag(user)

        request = self._close(request, ResetRequestStatus.COMPLETED, actor)
        logger.info(
            "password_reset.completed",
            request_id=str(request.id),
            user_id=str(user.id),
            actor_id=str(actor.requester_id),
        )
        return request

    @transaction.atomic
    def reject(self, id: str, actor: Actor) -> PasswordResetRequest:
        """Close the request without touching the password."""
        request = self._get_pending(id, actor)
        self._clear_reset_flag(request.user)
        request = self._close(request, ResetRequestStatus.REJECTED, actor)
        logger.info(
            "password_reset.rejected",
            request_id=str(request.id),
            actor_id=str(actor.requester_id),
        )
        return request

    def _get_pending(self, id: str, actor: Actor) -> PasswordResetRequest:
        if not actor.is_admin:
            raise Forbidden("Only administrators can process password resets.")
        request = self._reset_repo.get_for_update(id)
        if not request:
            raise PasswordResetNotFound("Password reset request not found.")
        if not request.is_pending:
            raise PasswordResetAlreadyProcessed(
                "This request has already been processed."
            )
        return request

    def _clear_reset_flag(self, user: User) -> None:
        user.password_reset_requested = False
        user.password_reset_requested_at = None
        self._user_repo.save(user)

    def _close(
        self, request: PasswordResetRequest, status: str, actor: Actor
    ) -> PasswordResetRequest:
        request.status = status
        request.completed_by_id = actor.requester_id
        request.completed_at = timezone.now()
        return self._reset_repo.save(request)
