"""Replace document file command.

ONLY content replacement of an existing document, guarded like metadata
edits.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from typing import Any, Union

from ...core.protocols import DocumentStore
from ...core.value_objects import Actor, DocumentAction, VersionToken
from ..queries.get_document_access import DocumentAccess
from ..services.access_gate import ensure_can_perform


@dataclass
class ReplaceDocumentFileData:
    """Data required to replace a document's file."""

    access: DocumentAccess
    actor: Actor
    file: Any
    observed_version: Union[VersionToken, str, None] = None


class ReplaceDocumentFileCommand:
    """Uploads a new file for an existing document."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def execute(self, data: ReplaceDocumentFileData) -> DocumentAccess:
        document = data.access.document
        ensure_can_perform(
            DocumentAction.REPLACE_FILE, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )
        updated = await self._store.replace_file(document.id, data.file, data.observed_version)
        return data.access.refreshed(data.actor, updated)
