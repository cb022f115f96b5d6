"""Accounts DTOs for the Service Layer.

Framework-agnostic, immutable pydantic v2 models carrying validated
input from the API layer into the services.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator, model_validator

MIN_PASSWORD_LENGTH = 6


def _check_password_length(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    return value


class RegisterUserDTO(BaseModel):
    """Self-registration of a customer account."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_must_be_valid(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required.")
        if len(v) > 50:
            raise ValueError("Name cannot exceed 50 characters.")
        return v

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        return _check_password_length(v)


class LoginDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class ForgotPasswordDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class UpdatePasswordDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        return _check_password_length(v)


class ProcessPasswordResetDTO(BaseModel):
    """Admin input to complete a pending password-reset request."""

    model_config = ConfigDict(frozen=True)

    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        return _check_password_length(v)

    @model_validator(mode="after")
    def passwords_must_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class DeleteUserByEmailDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr
    name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()
