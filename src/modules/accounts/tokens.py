"""JWT issuance (SimpleJWT).

Tokens carry the user's ``role`` as an informational claim; the
authorization decisions still read the role from the database user
resolved by ``JWTAuthentication``.
"""

from __future__ import annotations

from typing import Dict

from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.models import User


def issue_tokens(user: User) -> Dict[str, str]:
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }
