"""Access level value objects.

ONLY access levels - the stored grant level (viewer/editor) and the
derived effective permission (owner/editor/viewer/none).

Following maximum separation architecture - one file = one purpose.
"""

from enum import Enum
from typing import Optional, Union


class AccessLevel(str, Enum):
    """Access level a grant gives its user."""
    VIEWER = "viewer"
    EDITOR = "editor"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def outranks(self, other: 'AccessLevel') -> bool:
        """True when this level gives strictly more access than ``other``."""
        return self.rank > other.rank

    @classmethod
    def parse(cls, value: Union['AccessLevel', str]) -> 'AccessLevel':
        """Parse a case-sensitive wire value.

        Raises:
            ValueError: If the value is not a known access level
        """
        if isinstance(value, AccessLevel):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise ValueError(f"Invalid access level: {value!r}. Expected 'viewer' or 'editor'") from e


_LEVEL_RANK = {
    AccessLevel.VIEWER: 1,
    AccessLevel.EDITOR: 2,
}


class EffectivePermission(str, Enum):
    """Resolved permission of an actor on a document."""
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"
    NONE = "none"

    @classmethod
    def from_access_level(cls, level: Optional[AccessLevel]) -> 'EffectivePermission':
        if level is None:
            return cls.NONE
        return cls(level.value)

    @property
    def grants_access(self) -> bool:
        return self is not EffectivePermission.NONE

    @property
    def can_write(self) -> bool:
        return self in (EffectivePermission.OWNER, EffectivePermission.EDITOR)
