"""Accounts API views.

Exposes ``AuthService``, ``UserAdminService`` and
``PasswordResetService`` via DRF ViewSets.  Domain exceptions propagate
to ``modules.core.exceptions.standardized_exception_handler``, which
renders them with their HTTP status.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet, ViewSet

from modules.accounts.dtos import (
    DeleteUserByEmailDTO,
    ForgotPasswordDTO,
    LoginDTO,
    ProcessPasswordResetDTO,
    RegisterUserDTO,
    UpdatePasswordDTO,
)
from modules.accounts.models import ResetRequestStatus, User
from modules.accounts.permissions import IsAdminRole
from modules.accounts.repositories.django_repository import (
    PasswordResetDjangoRepository,
    UserDjangoRepository,
)
from modules.accounts.serializers import PasswordResetRequestSerializer, UserSerializer
from modules.accounts.services import AuthService, PasswordResetService, UserAdminService
from modules.accounts.tokens import issue_tokens
from modules.core.pagination import StandardResultsSetPagination
from shared.domain.actor import Actor

UUID_LOOKUP = r"[0-9a-fA-F-]{36}"


class AuthViewSet(ViewSet):
    """Registration, login and self-service password endpoints."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AuthService(
            user_repository=UserDjangoRepository(),
            reset_repository=PasswordResetDjangoRepository(),
        )

    def get_permissions(self):
        if self.action in {"me", "update_password"}:
            return [IsAuthenticated()]
        return [AllowAny()]

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = (
            "auth" if self.action in {"register", "login", "forgot_password"} else None
        )
        return super().get_throttles()

    @action(detail=False, methods=["post"])
    def register(self, request: Request) -> Response:
        """POST /api/v1/auth/register/"""
        dto = RegisterUserDTO(
            name=request.data.get("name", ""),
            email=request.data.get("email", ""),
            password=request.data.get("password", ""),
        )
        user = self._service.register(dto)
        return Response(
            {"user": UserSerializer(user).data, **issue_tokens(user)},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["post"])
    def login(self, request: Request) -> Response:
        """POST /api/v1/auth/login/"""
        dto = LoginDTO(
            email=request.data.get("email", ""),
            password=request.data.get("password", ""),
        )
        user = self._service.login(dto)
        return Response({"user": UserSerializer(user).data, **issue_tokens(user)})

    @action(detail=False, methods=["get"])
    def me(self, request: Request) -> Response:
        """GET /api/v1/auth/me/"""
        return Response({"user": UserSerializer(request.user).data})

    @action(detail=False, methods=["post"], url_path="forgot-password")
    def forgot_password(self, request: Request) -> Response:
        """POST /api/v1/auth/forgot-password/

        Opens a reset request for an administrator to process.
        """
        dto = ForgotPasswordDTO(email=request.data.get("email", ""))
        self._service.request_password_reset(dto.email)
        return Response(
            {
                "detail": "Password reset request submitted. "
                "An admin will process it shortly."
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["put"], url_path="update-password")
    def update_password(self, request: Request) -> Response:
        """PUT /api/v1/auth/update-password/

        Returns a fresh token pair for the new password.
        """
        dto = UpdatePasswordDTO(
            current_password=request.data.get("current_password", ""),
            new_password=request.data.get("new_password", ""),
        )
        user = self._service.update_password(request.user, dto)
        return Response(issue_tokens(user))


class AdminUserViewSet(GenericViewSet):
    """Administrator management of user accounts."""

    permission_classes = [IsAdminRole]
    serializer_class = UserSerializer
    pagination_class = StandardResultsSetPagination
    lookup_value_regex = UUID_LOOKUP
    queryset = User.objects.all()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserAdminService(user_repository=UserDjangoRepository())

    def get_queryset(self):
        return self._service.list_users()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/users/"""
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(UserSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/users/{pk}/"""
        user = self._service.get_user(pk)
        return Response({"user": UserSerializer(user).data})

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/users/{pk}/"""
        self._service.delete_user(pk, Actor.from_user(request.user))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["delete"], url_path="by-email")
    def delete_by_email(self, request: Request) -> Response:
        """DELETE /api/v1/admin/users/by-email/"""
        dto = DeleteUserByEmailDTO(
            email=request.data.get("email", ""),
            name=request.data.get("name"),
        )
        user = self._service.delete_user_by_email(dto, Actor.from_user(request.user))
        return Response({"detail": f"User {user.name} ({user.email}) deleted successfully."})


class AdminPasswordResetViewSet(GenericViewSet):
    """Administrator approval of password-reset requests."""

    permission_classes = [IsAdminRole]
    serializer_class = PasswordResetRequestSerializer
    lookup_value_regex = UUID_LOOKUP

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = PasswordResetService(
            reset_repository=PasswordResetDjangoRepository(),
            user_repository=UserDjangoRepository(),
        )

    def get_queryset(self):
        status_filter = self.request.query_params.get("status", ResetRequestStatus.PENDING)
        return self._service.list_requests(status_filter)

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/users/password-requests/?status=pending"""
        requests = PasswordResetRequestSerializer(self.get_queryset(), many=True)
        return Response({"requests": requests.data})

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/users/password-requests/{pk}/"""
        dto = ProcessPasswordResetDTO(
            new_password=request.data.get("new_password", ""),
            confirm_password=request.data.get("confirm_password", ""),
        )
        reset = self._service.complete(pk, dto, Actor.from_user(request.user))
        return Response(PasswordResetRequestSerializer(reset).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/users/password-requests/{pk}/"""
        reset = self._service.reject(pk, Actor.from_user(request.user))
        return Response(PasswordResetRequestSerializer(reset).data)
