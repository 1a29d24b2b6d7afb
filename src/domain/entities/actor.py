"""The authenticated caller on whose behalf an operation runs."""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"  # Privileged: approves, rejects, auto-approved submissions
    TEAM = "team"


@dataclass(frozen=True)
class Actor:
    id: str
    role: Role

    @property
    def is_privileged(self) -> bool:
        return self.role is Role.ADMIN

    def may_modify(self, owner_id: str) -> bool:
        """Owners and privileged actors may change or delete a transaction."""
        return self.is_privileged or self.id == owner_id
