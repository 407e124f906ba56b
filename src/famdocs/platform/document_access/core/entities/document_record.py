"""Document record entity.

ONLY the document snapshot the access layer needs - identity, family,
permanent owner, soft-delete flag and the version token of the snapshot.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from ..value_objects import AccessLevel, DocumentState, DocumentStatus, VersionToken


@dataclass(frozen=True)
class DocumentRecord:
    """Immutable snapshot of a document as last read or written.

    ``granted_access`` is the reading actor's own grant level as reported by
    the backing store; members cannot list a document's grants, so this is
    how a shared viewer or editor learns its own access.
    """

    id: str
    family_id: str
    owner_user_id: str
    is_deleted: bool = False
    version: Optional[VersionToken] = None

    # Supplemental read-only fields
    title: str = ""
    has_file: bool = False
    updated_at: Optional[datetime] = None
    granted_access: Optional[AccessLevel] = None
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not self.id:
            raise ValueError("Document ID cannot be empty")
        if not self.family_id:
            raise ValueError("Document family ID cannot be empty")
        if not self.owner_user_id:
            raise ValueError("Document owner ID cannot be empty")

    @property
    def status(self) -> DocumentStatus:
        return DocumentStatus.SOFT_DELETED if self.is_deleted else DocumentStatus.ACTIVE

    @property
    def state(self) -> DocumentState:
        return DocumentState(self.status)

    def with_version(self, version: Optional[VersionToken]) -> 'DocumentRecord':
        return replace(self, version=version)

    def soft_deleted(self) -> 'DocumentRecord':
        """Snapshot after a successful delete; it carries no version."""
        if not self.status.can_transition_to(DocumentStatus.SOFT_DELETED):
            raise ValueError(f"Document {self.id} is already deleted")
        return replace(self, is_deleted=True, version=None)

    def __str__(self) -> str:
        return f"document:{self.id}"
