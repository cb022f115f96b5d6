"""Accounts URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from modules.accounts.views import (
    AdminPasswordResetViewSet,
    AdminUserViewSet,
    AuthViewSet,
)

router = DefaultRouter(trailing_slash=True)
router.register("auth", AuthViewSet, basename="auth")
# Registered before ``admin/users`` so the prefix is not read as a user id.
router.register(
    "admin/users/password-requests",
    AdminPasswordResetViewSet,
    basename="admin-password-request",
)
router.register("admin/users", AdminUserViewSet, basename="admin-user")

urlpatterns = [
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("auth/token/verify/", TokenVerifyView.as_view(), name="token_verify"),
    *router.urls,
]
