"""Get document access query.

ONLY document loading for a view - reads the document (recording its
version) and evaluates what the actor may do with it.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, replace
from typing import Optional

from ...core.entities import DocumentRecord
from ...core.protocols import DocumentStore
from ...core.value_objects import Actor, DocumentAction, EffectivePermission, VersionToken
from ..services.access_gate import DocumentCapabilities, capabilities
from ..services.permission_resolver import GrantLookup, own_grant_lookup, resolve


@dataclass(frozen=True)
class DocumentAccess:
    """A loaded document together with the actor's permission on it."""

    document: DocumentRecord
    permission: EffectivePermission
    capabilities: DocumentCapabilities
    version: Optional[VersionToken] = None

    @classmethod
    def evaluate(cls, actor: Actor, document: DocumentRecord, grants: GrantLookup = None) -> 'DocumentAccess':
        lookup = grants if grants is not None else own_grant_lookup(actor, document)
        permission = resolve(actor, document, lookup)
        return cls(
            document=document,
            permission=permission,
            capabilities=capabilities(permission, actor.role, document.state),
            version=document.version,
        )

    @property
    def document_id(self) -> str:
        return self.document.id

    def allows(self, action: DocumentAction) -> bool:
        return self.capabilities.allows(action)

    def refreshed(self, actor: Actor, document: DocumentRecord) -> 'DocumentAccess':
        """Same permission over a newer snapshot of the document."""
        if document.is_deleted:
            return DocumentAccess.evaluate(actor, document)
        return replace(
            self,
            document=document,
            capabilities=capabilities(self.permission, actor.role, document.state),
            version=document.version,
        )


@dataclass
class GetDocumentAccessData:
    """Data required to load a document for an actor."""

    actor: Actor
    document_id: str
    grants: GrantLookup = None


class GetDocumentAccessQuery:
    """Loads a document and evaluates the actor's capabilities.

    Members cannot list grants, so unless ``grants`` is supplied the level
    reported on the document read is used for the grant step.
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    async def execute(self, data: GetDocumentAccessData) -> DocumentAccess:
        document = await self._store.get_document(data.document_id)
        return DocumentAccess.evaluate(data.actor, document, data.grants)
