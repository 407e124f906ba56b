"""Request payload models for the document service API."""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .....config import GrantSortField, SortOrder, ValidationLimits
from ...core.value_objects import AccessLevel, GrantRequest


class GrantItemRequest(BaseModel):
    """AssignmentItem."""

    user_id: str = Field(min_length=1)
    access_type: AccessLevel

    @classmethod
    def from_request(cls, request: GrantRequest) -> 'GrantItemRequest':
        return cls(user_id=request.user_id, access_type=request.access_level)


class BulkGrantRequest(BaseModel):
    """DocumentAssignmentCreate."""

    assignments: List[GrantItemRequest] = Field(
        min_length=ValidationLimits.MIN_BATCH_SIZE,
        max_length=ValidationLimits.MAX_BATCH_SIZE,
    )


class GrantUpdateRequest(BaseModel):
    """DocumentAssignmentUpdate."""

    access_type: AccessLevel


class DocumentUpdateRequest(BaseModel):
    """DocumentUpdate - only fields that are set are sent."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    expiry_date: Optional[date] = None
    details_json: Optional[Dict[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class GrantListParams(BaseModel):
    """Query parameters for listing a document's grants."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=ValidationLimits.DEFAULT_PAGE_SIZE, ge=1, le=ValidationLimits.MAX_PAGE_SIZE)
    access_type: Optional[AccessLevel] = None
    sort_by: GrantSortField = GrantSortField.ASSIGNED_AT
    sort_order: SortOrder = SortOrder.DESC

    def to_query(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
