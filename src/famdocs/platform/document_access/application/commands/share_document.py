"""Share document command.

ONLY bulk sharing - validates the batch locally, rejects items that can
never succeed without a round trip, and sends the rest to the store's
bulk upsert. Partial success is a result, not an exception.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from ...core.protocols import DocumentStore
from ...core.value_objects import Actor, BulkUpsertResult, DocumentAction, GrantRequest
from ..queries.get_document_access import DocumentAccess
from ..services.access_gate import ensure_can_perform
from ..services.grant_upsert_engine import GrantUpsertEngine

logger = logging.getLogger(__name__)


@dataclass
class ShareDocumentData:
    """Data required to share a document.

    ``items`` are ``GrantRequest`` objects, ``(user_id, access_level)``
    pairs or ``{"user_id", "access_type"}`` mappings.
    """

    access: DocumentAccess
    actor: Actor
    items: Sequence[Any] = field(default_factory=list)
    member_families: Optional[Mapping[str, str]] = None


class ShareDocumentCommand:
    """Shares a document with many users at once."""

    def __init__(self, store: DocumentStore, engine: Optional[GrantUpsertEngine] = None):
        """Initialize share document command.

        Args:
            store: Document store performing the bulk upsert
            engine: Batch validation and per-item prechecks
        """
        self._store = store
        self._engine = engine or GrantUpsertEngine.from_settings()

    async def execute(self, data: ShareDocumentData) -> BulkUpsertResult:
        """Share and report created, updated and rejected items.

        Raises:
            ValidationFailed: If the batch is empty, too large or malformed
            PermissionDenied: If the actor cannot manage sharing
        """
        requests = self._engine.validate_batch(data.items)
        document = data.access.document
        ensure_can_perform(
            DocumentAction.MANAGE_SHARING, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )

        local = BulkUpsertResult()
        to_send: List[GrantRequest] = []
        for request in requests:
            rejection = self._engine.precheck(document, request, data.member_families)
            if rejection:
                local.rejected.append(rejection)
            else:
                to_send.append(request)

        if not to_send:
            logger.info(f"Nothing to send for {document}: all {len(local.rejected)} item(s) rejected locally")
            return local

        remote = await self._store.upsert_grants(document.id, to_send)
        return local.merge(remote)
