"""Document access core domain layer.

Value objects, entities, exceptions and contracts. No I/O.
"""

from .value_objects import *
from .entities import *
from .exceptions import *
from .protocols import *

__all__ = [
    # Value Objects
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

    # Entities
    "DocumentRecord",
    "Grant",
    "GrantStore",

    # Exceptions
    "PreconditionFailed",
    "FieldIssue",
    "MissingVersionToken",
    "ValidationFailed",
    "PermissionDenied",
    "NotFound",

    # Protocols
    "Transport",
    "TransportResponse",
    "DocumentStore",
]
