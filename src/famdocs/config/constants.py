"""Constants and enums for famdocs.

This module defines the constants shared by the access-control and
concurrency layers. Values correspond to the document service API contract.
"""

from enum import Enum
from typing import Final


class Headers:
    """HTTP header names used for concurrency control."""

    ETAG: Final[str] = "ETag"
    IF_MATCH: Final[str] = "If-Match"
    CONTENT_TYPE: Final[str] = "Content-Type"


class ErrorCodes:
    """Error codes carried by famdocs exceptions and bulk results."""

    PRECONDITION_FAILED: Final[str] = "PRECONDITION_FAILED"
    VALIDATION_FAILED: Final[str] = "VALIDATION_FAILED"
    VERSION_REQUIRED: Final[str] = "VERSION_REQUIRED"
    PRECONDITION_REQUIRED: Final[str] = "PRECONDITION_REQUIRED"
    PERMISSION_DENIED: Final[str] = "PERMISSION_DENIED"
    NOT_FOUND: Final[str] = "NOT_FOUND"
    TRANSPORT_ERROR: Final[str] = "TRANSPORT_ERROR"

    # Per-item rejection reasons for bulk grant upserts
    SELF_ASSIGNMENT: Final[str] = "SELF_ASSIGNMENT"
    CROSS_FAMILY: Final[str] = "CROSS_FAMILY"


class ValidationLimits:
    """Hard limits enforced before any write."""

    MAX_BATCH_SIZE: Final[int] = 100
    MIN_BATCH_SIZE: Final[int] = 1
    DEFAULT_PAGE_SIZE: Final[int] = 20
    MAX_PAGE_SIZE: Final[int] = 100


class DowngradePolicy(str, Enum):
    """How a bulk upsert treats an editor grant that receives a viewer request."""

    RETAIN = "retain"  # editor is sticky, request reported as updated
    APPLY = "apply"    # downgrade is written


class GrantSortField(str, Enum):
    """Sortable fields for grant listings."""

    ASSIGNED_AT = "assigned_at"
    UPDATED_AT = "updated_at"
    ACCESS_TYPE = "access_type"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"
