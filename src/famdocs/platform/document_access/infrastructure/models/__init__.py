"""Wire payload models."""

from .requests import (
    BulkGrantRequest,
    DocumentUpdateRequest,
    GrantItemRequest,
    GrantListParams,
    GrantUpdateRequest,
)
from .responses import (
    ApiErrorPayload,
    BulkUpsertPayload,
    DocumentPayload,
    ErrorDetailPayload,
    FailedGrantPayload,
    GrantPagePayload,
    GrantPayload,
    VersionedResourcePayload,
)

__all__ = [
    "BulkGrantRequest",
    "DocumentUpdateRequest",
    "GrantItemRequest",
    "GrantListParams",
    "GrantUpdateRequest",
    "ApiErrorPayload",
    "BulkUpsertPayload",
    "DocumentPayload",
    "ErrorDetailPayload",
    "FailedGrantPayload",
    "GrantPagePayload",
    "GrantPayload",
    "VersionedResourcePayload",
]
