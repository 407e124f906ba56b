"""Document access value objects."""

from .version_token import VersionToken
from .access_level import AccessLevel, EffectivePermission
from .actor import Actor, ActorRole
from .document_action import DocumentAction, DocumentState, DocumentStatus
from .resource_key import ResourceKey, ResourceKind
from .grant_page import GrantPage
from .grant_request import (
    BulkRevokeResult,
    BulkUpsertResult,
    FailedRevoke,
    GrantRequest,
    RejectedGrant,
)

__all__ = [
    "VersionToken",
    "AccessLevel",
    "EffectivePermission",
    "Actor",
    "ActorRole",
    "DocumentAction",
    "DocumentState",
    "DocumentStatus",
    "ResourceKey",
    "ResourceKind",
    "GrantPage",
    "BulkRevokeResult",
    "BulkUpsertResult",
    "FailedRevoke",
    "GrantRequest",
    "RejectedGrant",
]
