"""Authenticated caller identity.

Credentials are verified upstream; requests arrive with the caller already
resolved, and this backend trusts that identity.
"""

from __future__ import annotations

from dataclasses import dataclass

from signalwatch.models.enums import UserRole


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
