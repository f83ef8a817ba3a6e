# storefront_http_api/auth.py

from __future__ import annotations

import enum
from dataclasses import dataclass


class Role(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Actor:
    """
    The caller of an operation, as asserted by the upstream gateway.
    """

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns(self, owner_id: str | None) -> bool:
        return owner_id is not None and owner_id == self.user_id

    def can_modify(self, owner_id: str | None) -> bool:
        """Owner or admin."""
        return self.is_admin or self.owns(owner_id)


__all__ = ["Role", "Actor"]
