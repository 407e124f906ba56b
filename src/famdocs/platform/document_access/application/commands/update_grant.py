"""Update grant command.

ONLY single-grant level changes. Downgrading an editor is a no-op that
keeps the editor level.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from typing import Union

from ...core.entities import Grant
from ...core.exceptions import ValidationFailed
from ...core.protocols import DocumentStore
from ...core.value_objects import AccessLevel, Actor, DocumentAction, VersionToken
from ..queries.get_document_access import DocumentAccess
from ..services.access_gate import ensure_can_perform
from ..services.grant_upsert_engine import SELF_ASSIGNMENT_MESSAGE


@dataclass
class UpdateGrantData:
    """Data required to change one user's access level."""

    access: DocumentAccess
    actor: Actor
    user_id: str
    access_level: Union[AccessLevel, str]
    observed_version: Union[VersionToken, str, None] = None


class UpdateGrantCommand:
    """Changes the access level of one existing grant."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def execute(self, data: UpdateGrantData) -> Grant:
        """Update the grant.

        Raises:
            PermissionDenied: If the actor cannot manage sharing
            ValidationFailed: If the level is unknown or the user is the owner
            MissingVersionToken: If the grant's version was never observed
            PreconditionFailed: If the grant changed since it was listed
            NotFound: If the grant was revoked meanwhile
        """
        document = data.access.document
        ensure_can_perform(
            DocumentAction.MANAGE_SHARING, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )
        try:
            level = AccessLevel.parse(data.access_level)
        except ValueError as e:
            raise ValidationFailed.for_field("access_level", str(e)) from e
        if data.user_id == document.owner_user_id:
            raise ValidationFailed.for_field("user_id", SELF_ASSIGNMENT_MESSAGE)

        return await self._store.update_grant(document.id, data.user_id, level, data.observed_version)
