"""Document action value objects.

ONLY the actions the access gate decides on, plus the document state the
decision depends on.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from enum import Enum


class DocumentAction(str, Enum):
    """Actions an actor can request on a document."""
    VIEW = "view"
    LIST = "list"
    PREVIEW = "preview"
    DOWNLOAD = "download"
    EDIT_METADATA = "edit_metadata"
    REPLACE_FILE = "replace_file"
    UPLOAD_FILE = "upload_file"
    DELETE = "delete"
    MANAGE_SHARING = "manage_sharing"


class DocumentStatus(str, Enum):
    """Lifecycle states of a document. SOFT_DELETED is terminal."""
    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"

    def can_transition_to(self, target: 'DocumentStatus') -> bool:
        return self is DocumentStatus.ACTIVE and target is DocumentStatus.SOFT_DELETED


@dataclass(frozen=True)
class DocumentState:
    """State of a document relevant to access decisions."""

    status: DocumentStatus = DocumentStatus.ACTIVE

    @property
    def is_deleted(self) -> bool:
        return self.status is DocumentStatus.SOFT_DELETED

    @classmethod
    def active(cls) -> 'DocumentState':
        return cls(DocumentStatus.ACTIVE)

    @classmethod
    def deleted(cls) -> 'DocumentState':
        return cls(DocumentStatus.SOFT_DELETED)
