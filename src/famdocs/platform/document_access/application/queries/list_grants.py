"""List grants query.

ONLY grant listing for the sharing view - one active grant per user,
each grant's version recorded for later updates and revokes.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .....config import FamdocsSettings, GrantSortField, SortOrder, get_settings
from ...core.exceptions import ValidationFailed
from ...core.protocols import DocumentStore
from ...core.value_objects import AccessLevel, Actor, DocumentAction, GrantPage
from ..services.access_gate import ensure_can_perform
from .get_document_access import DocumentAccess


@dataclass
class ListGrantsData:
    """Data required to list a document's grants."""

    access: DocumentAccess
    actor: Actor
    page: int = 1
    page_size: Optional[int] = None
    access_level: Union[AccessLevel, str, None] = None
    sort_by: Union[GrantSortField, str] = GrantSortField.ASSIGNED_AT
    sort_order: Union[SortOrder, str] = SortOrder.DESC


class ListGrantsQuery:
    """Lists who a document is shared with."""

    def __init__(self, store: DocumentStore, settings: Optional[FamdocsSettings] = None):
        self._store = store
        self._settings = settings or get_settings()

    async def execute(self, data: ListGrantsData) -> GrantPage:
        """List grants.

        Raises:
            PermissionDenied: If the actor cannot manage the document's sharing
            ValidationFailed: If paging, filter or sort parameters are invalid
        """
        document = data.access.document
        ensure_can_perform(
            DocumentAction.MANAGE_SHARING, data.access.permission, data.actor, document.state,
            document_id=document.id,
        )

        max_page_size = self._settings.max_page_size
        page_size = data.page_size or min(self._settings.default_page_size, max_page_size)
        if page_size > max_page_size:
            raise ValidationFailed.for_field("page_size", f"Page size cannot exceed {max_page_size}.")

        params = {
            "page": data.page,
            "page_size": page_size,
            "sort_by": data.sort_by,
            "sort_order": data.sort_order,
        }
        if data.access_level is not None:
            params["access_type"] = data.access_level
        return await self._store.list_grants(document.id, params)
