"""Resource key value object.

ONLY resource identity for concurrency tracking - names a versioned
resource (document, grant, user, family) independently of its token.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from enum import Enum


class ResourceKind(str, Enum):
    """Kinds of versioned resources."""
    DOCUMENT = "document"
    GRANT = "grant"
    USER = "user"
    FAMILY = "family"


@dataclass(frozen=True)
class ResourceKey:
    """Hashable identity of a versioned resource."""

    kind: ResourceKind
    identifier: str

    def __post_init__(self):
        if not self.identifier:
            raise ValueError("Resource identifier cannot be empty")

    @classmethod
    def document(cls, document_id: str) -> 'ResourceKey':
        return cls(ResourceKind.DOCUMENT, document_id)

    @classmethod
    def grant(cls, document_id: str, user_id: str) -> 'ResourceKey':
        return cls(ResourceKind.GRANT, f"{document_id}/{user_id}")

    @classmethod
    def user(cls, family_id: str, user_id: str) -> 'ResourceKey':
        return cls(ResourceKind.USER, f"{family_id}/{user_id}")

    @classmethod
    def family(cls, family_id: str) -> 'ResourceKey':
        return cls(ResourceKind.FAMILY, family_id)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.identifier}"
