"""Access gate.

ONLY allow/deny decisions - maps a requested document action plus the
resolved permission, the actor's role and the document state to a boolean.

``can_perform`` and ``capabilities`` are pure and never raise;
``ensure_can_perform`` is the raising form used on write paths.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional

from ...core.exceptions import PermissionDenied
from ...core.value_objects import (
    Actor,
    ActorRole,
    DocumentAction,
    DocumentState,
    EffectivePermission,
)

logger = logging.getLogger(__name__)

_ANY = frozenset({EffectivePermission.OWNER, EffectivePermission.EDITOR, EffectivePermission.VIEWER})
_WRITERS = frozenset({EffectivePermission.OWNER, EffectivePermission.EDITOR})

Rule = Callable[[EffectivePermission, ActorRole, DocumentState], bool]

_RULES: Dict[DocumentAction, Rule] = {
    DocumentAction.VIEW: lambda p, r, s: p in _ANY,
    DocumentAction.LIST: lambda p, r, s: p in _ANY,
    DocumentAction.PREVIEW: lambda p, r, s: p in _ANY,
    DocumentAction.DOWNLOAD: lambda p, r, s: p in _ANY,
    DocumentAction.EDIT_METADATA: lambda p, r, s: p in _WRITERS,
    DocumentAction.REPLACE_FILE: lambda p, r, s: p in _WRITERS,
    DocumentAction.UPLOAD_FILE: lambda p, r, s: p is EffectivePermission.OWNER,
    DocumentAction.DELETE: lambda p, r, s: p is EffectivePermission.OWNER or r is ActorRole.FAMILY_ADMIN,
    DocumentAction.MANAGE_SHARING: lambda p, r, s: p is EffectivePermission.OWNER or r is ActorRole.FAMILY_ADMIN,
}


def can_perform(
    action: DocumentAction,
    permission: EffectivePermission,
    actor_role: ActorRole,
    document_state: DocumentState,
) -> bool:
    """Decide whether ``action`` is allowed.

    Deleted documents deny everything. ``none`` denies everything too,
    including delete and sharing for a family admin of another family.
    """
    if document_state.is_deleted:
        return False
    if permission is EffectivePermission.NONE:
        return False
    rule = _RULES.get(DocumentAction(action))
    return bool(rule and rule(permission, actor_role, document_state))


@dataclass(frozen=True)
class DocumentCapabilities:
    """Boolean capability set that drives UI enablement."""

    can_view: bool = False
    can_list: bool = False
    can_preview: bool = False
    can_download: bool = False
    can_edit_metadata: bool = False
    can_replace_file: bool = False
    can_upload_file: bool = False
    can_delete: bool = False
    can_manage_sharing: bool = False

    def allows(self, action: DocumentAction) -> bool:
        return getattr(self, f"can_{DocumentAction(action).value}")

    def allowed_actions(self) -> FrozenSet[DocumentAction]:
        return frozenset(action for action in DocumentAction if self.allows(action))


def capabilities(
    permission: EffectivePermission,
    actor_role: ActorRole,
    document_state: DocumentState,
) -> DocumentCapabilities:
    """Evaluate every action at once."""
    return DocumentCapabilities(**{
        f"can_{action.value}": can_perform(action, permission, actor_role, document_state)
        for action in DocumentAction
    })


def can_create_document(actor_role: Optional[ActorRole]) -> bool:
    """Members and family admins create documents; super admins do not."""
    return actor_role in (ActorRole.MEMBER, ActorRole.FAMILY_ADMIN)


def can_list_documents(actor_role: Optional[ActorRole]) -> bool:
    return actor_role in (ActorRole.MEMBER, ActorRole.FAMILY_ADMIN)


def ensure_can_perform(
    action: DocumentAction,
    permission: EffectivePermission,
    actor: Actor,
    document_state: DocumentState,
    document_id: Optional[str] = None,
) -> None:
    """Raise PermissionDenied when the gate says no.

    Raises:
        PermissionDenied: If the action is not allowed
    """
    if can_perform(action, permission, actor.role, document_state):
        return

    logger.warning(
        f"Denied {DocumentAction(action).value} on document {document_id} for {actor} "
        f"(permission={permission.value}, deleted={document_state.is_deleted})"
    )
    raise PermissionDenied(
        f"You do not have permission to {DocumentAction(action).value.replace('_', ' ')} this document.",
        actor_id=actor.id,
        action=DocumentAction(action).value,
        document_id=document_id
    )
