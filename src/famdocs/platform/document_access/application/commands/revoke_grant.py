"""Revoke grant command.

ONLY single revocation - tombstones one user's grant, guarded by the
grant's version.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from typing import Union

from ...core.protocols import DocumentStore
from ...core.value_objects import Actor, DocumentAction, VersionToken
from ..queries.get_document_access import DocumentAccess
from ..services.access_gate import ensure_can_perform


@dataclass
class RevokeGrantData:
    """Data required to revoke one user's access."""

    access: DocumentAccess
    actor: Actor
    user_id: str
    observed_version: Union[VersionToken, str, None] = None


class RevokeGrantCommand:
    """Removes one user's access to a document."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def execute(self, data: RevokeGrantData) -> None:
        document = data.access.document
        ensure_can_perform(
            DocumentAction.MANAGE_SHARING, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )
        await self._store.revoke_grant(document.id, data.user_id, data.observed_version)
