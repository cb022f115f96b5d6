"""Identity context passed into every use case.

The authentication layer (SimpleJWT) resolves the user; services only
ever see an ``Actor`` and never validate credentials themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Actor:
    requester_id: UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_user(cls, user: Any) -> Actor:
        """Build an actor from an authenticated ``accounts.User``."""
        return cls(requester_id=user.id, role=user.role)
