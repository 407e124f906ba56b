"""Grant upsert engine.

ONLY sharing mutations on the grant model - applies a batch of requested
(user, access level) pairs to a GrantStore and reports created, updated
and rejected items. Also the single-grant update and revoke paths.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Sequence

from .....config import DowngradePolicy, ErrorCodes, FamdocsSettings, ValidationLimits, get_settings
from .....utils import utc_now
from ...core.entities import DocumentRecord, Grant, GrantStore
from ...core.exceptions import FieldIssue, NotFound, ValidationFailed
from ...core.value_objects import (
    AccessLevel,
    Actor,
    BulkUpsertResult,
    DocumentAction,
    GrantRequest,
    RejectedGrant,
    ResourceKey,
)
from .access_gate import ensure_can_perform
from .permission_resolver import resolve

logger = logging.getLogger(__name__)

SELF_ASSIGNMENT_MESSAGE = "Cannot share with the owner, they already have full access."
CROSS_FAMILY_MESSAGE = "User must belong to the same family as the document."


class GrantUpsertEngine:
    """Applies sharing requests to the normalized grant model.

    Policy per item, evaluated independently (partial success is normal):
    - sharing with the owner is rejected (``SELF_ASSIGNMENT``);
    - a user outside the document's family is rejected (``CROSS_FAMILY``);
    - no active grant -> created;
    - same level -> unchanged, reported as updated;
    - viewer -> editor -> upgraded, reported as updated;
    - editor -> viewer -> follows ``downgrade_policy``; with ``RETAIN`` the
      editor grant is kept and the item is still reported as updated.
    """

    def __init__(
        self,
        downgrade_policy: DowngradePolicy = DowngradePolicy.RETAIN,
        max_batch_size: int = ValidationLimits.MAX_BATCH_SIZE,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize engine.

        Args:
            downgrade_policy: Bulk-path treatment of editor -> viewer requests
            max_batch_size: Maximum items per batch (capped at 100)
            clock: Source of timestamps for new and changed grants
        """
        self._downgrade_policy = DowngradePolicy(downgrade_policy)
        self._max_batch_size = min(max_batch_size, ValidationLimits.MAX_BATCH_SIZE)
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Optional[FamdocsSettings] = None, **kwargs) -> 'GrantUpsertEngine':
        settings = settings or get_settings()
        return cls(
            downgrade_policy=settings.bulk_downgrade_policy,
            max_batch_size=settings.max_batch_size,
            **kwargs
        )

    @property
    def downgrade_policy(self) -> DowngradePolicy:
        return self._downgrade_policy

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    def validate_batch(self, items: Sequence[Any]) -> List[GrantRequest]:
        """Check the batch as a whole and coerce its items.

        Raises:
            ValidationFailed: If the batch is empty, too large, or malformed
        """
        if len(items) < ValidationLimits.MIN_BATCH_SIZE:
            raise ValidationFailed.for_field("items", "At least one user is required.")
        if len(items) > self._max_batch_size:
            raise ValidationFailed.for_field(
                "items", f"No more than {self._max_batch_size} users can be shared with at once."
            )

        requests: List[GrantRequest] = []
        issues: List[FieldIssue] = []
        for index, item in enumerate(items):
            try:
                requests.append(GrantRequest.coerce(item))
            except (TypeError, ValueError) as e:
                issues.append(FieldIssue(f"items[{index}]", str(e)))
        if issues:
            raise ValidationFailed("Some share requests are invalid.", issues=issues)
        return requests

    def precheck(
        self,
        document: DocumentRecord,
        request: GrantRequest,
        member_families: Optional[Mapping[str, str]] = None,
    ) -> Optional[RejectedGrant]:
        """Per-item preconditions; returns the rejection or None.

        ``member_families`` maps user id to family id. When omitted the
        family check is left to the backing store.
        """
        if request.user_id == document.owner_user_id:
            return RejectedGrant(
                request.user_id, request.access_level, ErrorCodes.SELF_ASSIGNMENT, SELF_ASSIGNMENT_MESSAGE
            )
        if member_families is not None and member_families.get(request.user_id) != document.family_id:
            return RejectedGrant(
                request.user_id, request.access_level, ErrorCodes.CROSS_FAMILY, CROSS_FAMILY_MESSAGE
            )
        return None

    def upsert_batch(
        self,
        document: DocumentRecord,
        requester: Actor,
        items: Sequence[Any],
        existing: GrantStore,
        member_families: Mapping[str, str],
    ) -> BulkUpsertResult:
        """Apply ``items`` to ``existing`` in order and report the outcome.

        Items are applied against the evolving store, so a user repeated
        within one batch is updated rather than duplicated.

        Raises:
            ValidationFailed: If the batch as a whole is invalid
            PermissionDenied: If ``requester`` cannot manage sharing
        """
        requests = self.validate_batch(items)
        self._ensure_can_share(document, requester, existing)

        result = BulkUpsertResult()
        for request in requests:
            rejection = self.precheck(document, request, member_families)
            if rejection:
                result.rejected.append(rejection)
                continue

            current = existing.active_grant(document.id, request.user_id)
            if current is None:
                now = self._clock()
                grant = Grant(
                    document_id=document.id,
                    user_id=request.user_id,
                    access_level=request.access_level,
                    granted_by=requester.id,
                    assigned_at=now,
                    updated_at=now,
                )
                result.created.append(existing.add(grant))
                continue

            self._apply_level(current, request.access_level, requester, self._downgrade_policy)
            result.updated.append(current)

        logger.info(
            f"Sharing on document {document.id} by {requester}: created={len(result.created)} "
            f"updated={len(result.updated)} rejected={len(result.rejected)}"
        )
        return result

    def update_grant(
        self,
        document: DocumentRecord,
        requester: Actor,
        user_id: str,
        access_level: AccessLevel,
        existing: GrantStore,
        member_families: Optional[Mapping[str, str]] = None,
    ) -> Grant:
        """Single-grant update. Downgrades are always a retained no-op.

        Raises:
            PermissionDenied: If ``requester`` cannot manage sharing
            ValidationFailed: If the target is the owner or another family
            NotFound: If the user has no active grant
        """
        request = GrantRequest(user_id, access_level)
        self._ensure_can_share(document, requester, existing)

        rejection = self.precheck(document, request, member_families)
        if rejection:
            raise ValidationFailed.for_field("user_id", rejection.message)

        current = existing.active_grant(document.id, user_id)
        if current is None:
            raise NotFound(
                "Assignment not found or has been removed.",
                resource_key=ResourceKey.grant(document.id, user_id)
            )
        self._apply_level(current, request.access_level, requester, DowngradePolicy.RETAIN)
        return current

    def revoke_grant(
        self,
        document: DocumentRecord,
        requester: Actor,
        user_id: str,
        existing: GrantStore,
    ) -> Grant:
        """Tombstone the user's active grant.

        Raises:
            PermissionDenied: If ``requester`` cannot manage sharing
            NotFound: If the user has no active grant
        """
        self._ensure_can_share(document, requester, existing)
        grant = existing.revoke(document.id, user_id, revoked_by=requester.id, at=self._clock())
        logger.info(f"Revoked {grant} on document {document.id} by {requester}")
        return grant

    def _apply_level(self, current: Grant, requested: AccessLevel, requester: Actor,
                     policy: DowngradePolicy) -> None:
        if requested is current.access_level:
            return
        if current.access_level.outranks(requested) and policy is DowngradePolicy.RETAIN:
            logger.debug(f"Retaining {current} on document {current.document_id}; downgrade to {requested.value} ignored")
            return
        current.change_level(requested, changed_by=requester.id, at=self._clock())

    def _ensure_can_share(self, document: DocumentRecord, requester: Actor, existing: GrantStore) -> None:
        permission = resolve(requester, document, existing)
        ensure_can_perform(
            DocumentAction.MANAGE_SHARING, permission, requester, document.state, document_id=document.id
        )
