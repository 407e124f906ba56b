"""Actor value object.

ONLY the acting user - identity, role and family as supplied by the
authentication collaborator. Immutable for the duration of a request.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ActorRole(str, Enum):
    """Roles an authenticated user can hold."""
    SUPER_ADMIN = "superadmin"
    FAMILY_ADMIN = "familyadmin"
    MEMBER = "member"


@dataclass(frozen=True)
class Actor:
    """The current user as seen by the access layer."""

    id: str
    role: ActorRole
    family_id: Optional[str] = None

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("Actor ID must be a non-empty string")
        if not isinstance(self.role, ActorRole):
            try:
                object.__setattr__(self, 'role', ActorRole(self.role))
            except ValueError as e:
                raise ValueError(f"Unknown actor role: {self.role!r}") from e

    @classmethod
    def create(cls, id: str, role: Union[ActorRole, str], family_id: Optional[str] = None) -> 'Actor':
        return cls(id=id, role=ActorRole(role), family_id=family_id)

    @property
    def is_family_admin(self) -> bool:
        return self.role is ActorRole.FAMILY_ADMIN

    def is_family_admin_of(self, family_id: Optional[str]) -> bool:
        """Family admin of exactly this family."""
        return self.is_family_admin and family_id is not None and self.family_id == family_id

    def __str__(self) -> str:
        return f"{self.role.value}:{self.id}"
