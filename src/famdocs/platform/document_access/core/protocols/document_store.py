"""Document store protocol.

ONLY the document/grant access contract the application layer depends on -
reads capture versions, writes are guarded by them.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Mapping, Sequence, Union
from typing_extensions import Protocol, runtime_checkable

from ..entities import DocumentRecord, Grant
from ..value_objects import AccessLevel, BulkUpsertResult, GrantPage, GrantRequest, VersionToken

Version = Union[VersionToken, str, None]


@runtime_checkable
class DocumentStore(Protocol):
    """Document and grant operations against the backing store."""

    async def get_document(self, document_id: str) -> DocumentRecord:
        """Read a document and record its version."""
        ...

    async def update_document(self, document_id: str, fields: Mapping[str, Any],
                              observed_version: Version = None) -> DocumentRecord:
        """Patch metadata; returns the new snapshot with its new version."""
        ...

    async def replace_file(self, document_id: str, file: Any,
                           observed_version: Version = None) -> DocumentRecord:
        """Replace the stored file; returns the new snapshot with its new version."""
        ...

    async def delete_document(self, document_id: str, observed_version: Version = None) -> None:
        """Soft-delete the document."""
        ...

    async def list_grants(self, document_id: str, params: Any = None) -> GrantPage:
        """List active grants, one per user, recording each grant's version."""
        ...

    async def upsert_grants(self, document_id: str, requests: Sequence[GrantRequest]) -> BulkUpsertResult:
        """Bulk create/update grants."""
        ...

    async def update_grant(self, document_id: str, user_id: str, access_level: AccessLevel,
                           observed_version: Version = None) -> Grant:
        """Change one grant's level."""
        ...

    async def revoke_grant(self, document_id: str, user_id: str, observed_version: Version = None) -> None:
        """Revoke one grant."""
        ...
