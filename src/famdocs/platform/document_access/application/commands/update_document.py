"""Update document command.

ONLY metadata edits - gated by the actor's capabilities, guarded by the
document version observed when the view loaded it.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union

from ...core.protocols import DocumentStore
from ...core.value_objects import Actor, DocumentAction, VersionToken
from ..queries.get_document_access import DocumentAccess
from ..services.access_gate import ensure_can_perform


@dataclass
class UpdateDocumentData:
    """Data required to edit a document's metadata."""

    access: DocumentAccess
    actor: Actor
    fields: Dict[str, Any] = field(default_factory=dict)
    observed_version: Union[VersionToken, str, None] = None


class UpdateDocumentCommand:
    """Edits document metadata under optimistic concurrency.

    A ``PreconditionFailed`` means someone else changed the document; the
    caller must reload it and let the user decide again.
    """

    def __init__(self, store: DocumentStore):
        """Initialize update document command.

        Args:
            store: Document store performing guarded writes
        """
        self._store = store

    async def execute(self, data: UpdateDocumentData) -> DocumentAccess:
        """Apply the edit and return access over the new snapshot.

        Raises:
            PermissionDenied: If the actor may not edit this document
            ValidationFailed: If the fields are invalid
            MissingVersionToken: If no version was observed
            PreconditionFailed: If the document changed since it was read
        """
        document = data.access.document
        ensure_can_perform(
            DocumentAction.EDIT_METADATA, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )
        updated = await self._store.update_document(document.id, data.fields, data.observed_version)
        return data.access.refreshed(data.actor, updated)
