"""Grant entity.

ONLY document sharing grants - one user's viewer or editor access to one
document. Revocation tombstones the row instead of deleting it.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from .....utils import utc_now
from ..value_objects import AccessLevel, ResourceKey, VersionToken


@dataclass
class Grant:
    """Sharing grant (a.k.a. assignment).

    At most one active grant exists per (document_id, user_id); the
    document owner never has one.
    """

    document_id: str
    user_id: str
    access_level: AccessLevel = AccessLevel.VIEWER
    is_revoked: bool = False

    id: str = field(default_factory=lambda: str(uuid4()))
    granted_by: Optional[str] = None
    assigned_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    # Revocation
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None

    def __post_init__(self):
        """Validate entity state after initialization."""
        if not self.document_id:
            raise ValueError("Grant document ID cannot be empty")
        if not self.user_id:
            raise ValueError("Grant user ID cannot be empty")
        self.access_level = AccessLevel.parse(self.access_level)

    @property
    def key(self) -> tuple:
        return (self.document_id, self.user_id)

    @property
    def resource_key(self) -> ResourceKey:
        return ResourceKey.grant(self.document_id, self.user_id)

    @property
    def version(self) -> VersionToken:
        """Token synthesized from ``updated_at``."""
        return VersionToken.from_timestamp(self.updated_at)

    def is_active(self) -> bool:
        return not self.is_revoked

    def change_level(self, level: AccessLevel, changed_by: Optional[str] = None,
                     at: Optional[datetime] = None) -> None:
        """Write a new access level in place."""
        if self.is_revoked:
            raise ValueError("Cannot change a revoked grant")
        self.access_level = AccessLevel.parse(level)
        if changed_by:
            self.granted_by = changed_by
        self.updated_at = at or utc_now()

    def revoke(self, revoked_by: Optional[str] = None, at: Optional[datetime] = None) -> None:
        """Tombstone the grant."""
        if self.is_revoked:
            raise ValueError("Grant is already revoked")
        moment = at or utc_now()
        self.is_revoked = True
        self.revoked_at = moment
        self.revoked_by = revoked_by
        self.updated_at = moment

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation used by the document service."""
        return {
            "id": self.id,
            "document_id": self.document_id,
            "assign_to_user_id": self.user_id,
            "owner_id": self.granted_by,
            "access_type": self.access_level.value,
            "assigned_at": self.assigned_at.isoformat().replace("+00:00", "Z"),
            "updated_at": self.updated_at.isoformat().replace("+00:00", "Z"),
            "is_del": self.is_revoked,
        }

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.access_level.value}"

    def __repr__(self) -> str:
        return (f"Grant(document_id='{self.document_id}', user_id='{self.user_id}', "
                f"access_level='{self.access_level.value}', is_revoked={self.is_revoked})")
