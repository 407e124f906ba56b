"""Delete document command.

ONLY soft deletion - Active -> SoftDeleted, owner or family admin only,
guarded by the observed version.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass
from typing import Union

from ...core.entities import DocumentRecord
from ...core.protocols import DocumentStore
from ...core.value_objects import Actor, DocumentAction, VersionToken
from ..queries.get_document_access import DocumentAccess
from ..services.access_gate import ensure_can_perform

logger = logging.getLogger(__name__)


@dataclass
class DeleteDocumentData:
    """Data required to delete a document."""

    access: DocumentAccess
    actor: Actor
    observed_version: Union[VersionToken, str, None] = None


class DeleteDocumentCommand:
    """Soft-deletes a document. The deleted snapshot carries no version."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def execute(self, data: DeleteDocumentData) -> DocumentRecord:
        """Delete the document.

        Raises:
            PermissionDenied: If the actor is neither owner nor family admin
            PreconditionFailed: If the document changed since it was read
        """
        document = data.access.document
        ensure_can_perform(
            DocumentAction.DELETE, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )
        await self._store.delete_document(document.id, data.observed_version)
        logger.info(f"{data.actor} deleted {document}")
        return document.soft_deleted()
