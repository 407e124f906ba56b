"""famdocs - access control and optimistic concurrency for family documents.

Computes who may do what to a document, normalizes sharing grants into one
active grant per user, and guards every write with a version precondition.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    DowngradePolicy,
    ErrorCodes,
    FamdocsSettings,
    get_settings,
)

from .core.exceptions import (
    # Base Exception
    FamdocsError,

    # Common Exceptions
    ConfigurationError,
    ValidationError,
    AuthorizationError,
    ConflictError,
    TransportError,

    # Utility Functions
    get_http_status_code,
    create_error_response,
)

from .platform.document_access import (
    # Value Objects
    AccessLevel,
    Actor,
    ActorRole,
    BulkRevokeResult,
    BulkUpsertResult,
    DocumentAction,
    EffectivePermission,
    GrantRequest,
    ResourceKey,
    VersionToken,

    # Entities
    DocumentRecord,
    Grant,
    GrantStore,

    # Exceptions
    MissingVersionToken,
    NotFound,
    PermissionDenied,
    PreconditionFailed,
    ValidationFailed,

    # Services
    ConcurrencyGuard,
    DocumentCapabilities,
    GrantUpsertEngine,
    can_perform,
    capabilities,
    resolve,

    # Wiring
    DocumentAccess,
    DocumentAccessModule,
    HttpxTransport,
    InMemoryDocumentBackend,
)

__all__ = [
    "__version__",
    "DowngradePolicy",
    "ErrorCodes",
    "FamdocsSettings",
    "get_settings",
    "FamdocsError",
    "ConfigurationError",
    "ValidationError",
    "AuthorizationError",
    "ConflictError",
    "TransportError",
    "get_http_status_code",
    "create_error_response",
    "AccessLevel",
    "Actor",
    "ActorRole",
    "BulkRevokeResult",
    "BulkUpsertResult",
    "DocumentAction",
    "EffectivePermission",
    "GrantRequest",
    "ResourceKey",
    "VersionToken",
    "DocumentRecord",
    "Grant",
    "GrantStore",
    "MissingVersionToken",
    "NotFound",
    "PermissionDenied",
    "PreconditionFailed",
    "ValidationFailed",
    "ConcurrencyGuard",
    "DocumentCapabilities",
    "GrantUpsertEngine",
    "can_perform",
    "capabilities",
    "resolve",
    "DocumentAccess",
    "DocumentAccessModule",
    "HttpxTransport",
    "InMemoryDocumentBackend",
]
