"""Response payload models for the document service API.

Field names match the wire format exactly (snake_case, no renaming).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...core.entities import DocumentRecord, Grant
from ...core.value_objects import AccessLevel, RejectedGrant, VersionToken


class DocumentPayload(BaseModel):
    """DocumentRead schema."""

    model_config = ConfigDict(extra="allow")

    id: str
    family_id: str
    owner_user_id: str
    title: str = ""
    file_path: Optional[str] = None
    is_del: bool = False
    updated_at: Optional[datetime] = None
    permission: Optional[str] = Field(default=None, description="Reading user's level: owner, editor or viewer")

    def to_record(self, version: Optional[VersionToken] = None) -> DocumentRecord:
        granted = self.permission if self.permission in (AccessLevel.VIEWER.value, AccessLevel.EDITOR.value) else None
        return DocumentRecord(
            id=self.id,
            family_id=self.family_id,
            owner_user_id=self.owner_user_id,
            is_deleted=self.is_del,
            version=version,
            title=self.title,
            has_file=bool(self.file_path),
            updated_at=self.updated_at,
            granted_access=AccessLevel(granted) if granted else None,
            attributes=dict(self.model_extra or {}),
        )


class GrantPayload(BaseModel):
    """DocumentAssignmentRead schema."""

    model_config = ConfigDict(extra="ignore")

    id: str
    document_id: str
    assign_to_user_id: str
    owner_id: Optional[str] = None
    access_type: AccessLevel
    assigned_at: datetime
    updated_at: datetime
    is_del: bool = False

    def to_grant(self) -> Grant:
        return Grant(
            id=self.id,
            document_id=self.document_id,
            user_id=self.assign_to_user_id,
            access_level=self.access_type,
            is_revoked=self.is_del,
            granted_by=self.owner_id,
            assigned_at=self.assigned_at,
            updated_at=self.updated_at,
        )


class GrantPagePayload(BaseModel):
    """Paginated grant listing."""

    items: List[GrantPayload] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20
    total_pages: int = 0
    next_page: Optional[str] = None
    prev_page: Optional[str] = None


class FailedGrantPayload(BaseModel):
    """Item of a bulk upsert that failed validation."""

    user_id: str
    access_type: AccessLevel
    error: Optional[str] = None
    code: Optional[str] = None

    def to_rejected(self) -> RejectedGrant:
        return RejectedGrant(
            user_id=self.user_id,
            access_level=self.access_type,
            reason_code=self.code or self.error or "REJECTED",
            message=self.error or "",
        )


class BulkUpsertPayload(BaseModel):
    """Bulk upsert outcome."""

    created: List[GrantPayload] = Field(default_factory=list)
    updated: List[GrantPayload] = Field(default_factory=list)
    failed: List[FailedGrantPayload] = Field(default_factory=list)


class ErrorDetailPayload(BaseModel):
    field: str = "general"
    issue: str = ""


class ErrorBodyPayload(BaseModel):
    code: str = "UNKNOWN_ERROR"
    details: List[ErrorDetailPayload] = Field(default_factory=list)


class ApiErrorPayload(BaseModel):
    """Standard API error response."""

    error: ErrorBodyPayload = Field(default_factory=ErrorBodyPayload)
    message: str = "An unknown error occurred"


class VersionedResourcePayload(BaseModel):
    """Any versioned resource (user, family) read through the directory API."""

    model_config = ConfigDict(extra="allow")

    id: str
    updated_at: Optional[datetime] = None

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump()
