"""Accounts DRF serializers.

Input validation beyond shape lives in the pydantic DTOs; these
serializers shape the public JSON of users and reset requests.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import PasswordResetRequest, User


class UserSerializer(serializers.ModelSerializer):
    """Public representation of a user (never exposes the password hash)."""

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "is_active",
            "password_reset_requested",
            "password_reset_requested_at",
            "created_at",
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class PasswordResetRequestSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = PasswordResetRequest
        fields = [
            "id",
            "user",
            "status",
            "completed_by_id",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields
