"""Revoke grants command.

ONLY bulk revocation - revokes several users one at a time and reports
per-user outcomes. Each revoke is guarded by that grant's own version.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .....config import ValidationLimits
from .....core.exceptions import FamdocsError
from ...core.exceptions import ValidationFailed
from ...core.protocols import DocumentStore
from ...core.value_objects import Actor, BulkRevokeResult, DocumentAction, FailedRevoke
from ..queries.get_document_access import DocumentAccess
from ..services.access_gate import ensure_can_perform

logger = logging.getLogger(__name__)


@dataclass
class RevokeGrantsData:
    """Data required to revoke several users' access."""

    access: DocumentAccess
    actor: Actor
    user_ids: List[str] = field(default_factory=list)


class RevokeGrantsCommand:
    """Revokes many grants; failures are collected, not raised."""

    def __init__(self, store: DocumentStore, max_batch_size: Optional[int] = None):
        self._store = store
        self._max_batch_size = min(max_batch_size or ValidationLimits.MAX_BATCH_SIZE, ValidationLimits.MAX_BATCH_SIZE)

    async def execute(self, data: RevokeGrantsData) -> BulkRevokeResult:
        """Revoke each user in order.

        Raises:
            ValidationFailed: If the list is empty or too large
            PermissionDenied: If the actor cannot manage sharing
        """
        if not data.user_ids:
            raise ValidationFailed.for_field("user_ids", "At least one user is required.")
        if len(data.user_ids) > self._max_batch_size:
            raise ValidationFailed.for_field(
                "user_ids", f"No more than {self._max_batch_size} users can be removed at once."
            )

        document = data.access.document
        ensure_can_perform(
            DocumentAction.MANAGE_SHARING, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )

        result = BulkRevokeResult()
        for user_id in dict.fromkeys(data.user_ids):
            try:
                await self._store.revoke_grant(document.id, user_id)
            except FamdocsError as e:
                result.failed.append(FailedRevoke(user_id, e.error_code, e.message))
                continue
            result.succeeded.append(user_id)

        logger.info(
            f"Revoked {len(result.succeeded)} grant(s) on {document}; {len(result.failed)} failed"
        )
        return result
