"""Document gateway.

ONLY document and grant endpoints of the document service. Every read
captures a version token; every write presents one through the
ConcurrencyGuard.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ...application.services.concurrency_guard import ConcurrencyGuard
from ...core.entities import DocumentRecord, Grant, GrantStore
from ...core.protocols import Transport, TransportResponse
from ...core.value_objects import (
    AccessLevel,
    BulkUpsertResult,
    GrantPage,
    GrantRequest,
    ResourceKey,
    VersionToken,
)
from ..models import (
    BulkGrantRequest,
    BulkUpsertPayload,
    DocumentPayload,
    DocumentUpdateRequest,
    GrantItemRequest,
    GrantListParams,
    GrantPagePayload,
    GrantPayload,
    GrantUpdateRequest,
)
from .error_mapping import malformed_response, raise_for_response, validation_failed_from_pydantic

logger = logging.getLogger(__name__)

Version = Union[VersionToken, str, None]


class DocumentGateway:
    """Document service client for documents and their grants.

    Implements the ``DocumentStore`` protocol.
    """

    def __init__(
        self,
        transport: Transport,
        guard: Optional[ConcurrencyGuard] = None,
        base_path: str = "/v1/documents",
    ):
        self._transport = transport
        self._guard = guard or ConcurrencyGuard.from_settings()
        self._base_path = base_path.rstrip("/")

    @property
    def guard(self) -> ConcurrencyGuard:
        return self._guard

    async def get_document(self, document_id: str) -> DocumentRecord:
        key = ResourceKey.document(document_id)
        response = await self._guard.read(
            key, lambda: self._send("GET", self._document_path(document_id), resource_key=key)
        )
        return self._document(response.data, self._guard.observed(key))

    async def update_document(
        self,
        document_id: str,
        fields: Union[Mapping[str, Any], DocumentUpdateRequest],
        observed_version: Version = None,
    ) -> DocumentRecord:
        """Patch document metadata.

        Raises:
            ValidationFailed: If ``fields`` are invalid locally or rejected by the store
            MissingVersionToken: If the document was never read
            PreconditionFailed: If the document changed since it was read
        """
        request = self._build(DocumentUpdateRequest, fields)
        key = ResourceKey.document(document_id)
        outcome = await self._guard.mutate(
            key,
            lambda headers: self._send(
                "PATCH", self._document_path(document_id),
                json=request.to_payload(), headers=headers, resource_key=key,
            ),
            observed_version,
        )
        logger.info(f"Updated document {document_id} fields={sorted(request.to_payload())}")
        return self._document(outcome.data, outcome.new_version)

    async def replace_file(self, document_id: str, file: Any, observed_version: Version = None) -> DocumentRecord:
        """Upload a new file for an existing document."""
        key = ResourceKey.document(document_id)
        outcome = await self._guard.mutate(
            key,
            lambda headers: self._send(
                "PUT", f"{self._document_path(document_id)}/file",
                files={"file": file}, headers=headers, resource_key=key,
            ),
            observed_version,
        )
        logger.info(f"Replaced file of document {document_id}")
        return self._document(outcome.data, outcome.new_version)

    async def delete_document(self, document_id: str, observed_version: Version = None) -> None:
        """Soft-delete a document. The recorded token is dropped afterwards."""
        key = ResourceKey.document(document_id)
        await self._guard.mutate(
            key,
            lambda headers: self._send("DELETE", self._document_path(document_id), headers=headers, resource_key=key),
            observed_version,
        )
        self._guard.forget(key)
        logger.info(f"Deleted document {document_id}")

    async def list_grants(
        self,
        document_id: str,
        params: Union[GrantListParams, Mapping[str, Any], None] = None,
    ) -> GrantPage:
        """List active grants, one per user, recording each grant's version."""
        query = self._build(GrantListParams, params or {})
        response = await self._send(
            "GET", self._grants_path(document_id), params=query.to_query(),
            resource_key=ResourceKey.document(document_id),
        )
        try:
            payload = GrantPagePayload.model_validate(response.data)
        except PydanticValidationError as e:
            raise malformed_response(e, "grant list") from e

        store = GrantStore.from_rows(item.to_grant() for item in payload.items)
        items = store.active_grants(document_id)
        for grant in items:
            self._guard.record(grant.resource_key, grant.version)

        return GrantPage(
            items=items,
            total=payload.total,
            page=payload.page,
            page_size=payload.page_size,
            total_pages=payload.total_pages,
            next_page=payload.next_page,
            prev_page=payload.prev_page,
        )

    async def upsert_grants(self, document_id: str, requests: Sequence[GrantRequest]) -> BulkUpsertResult:
        """Share a document with many users at once.

        Raises:
            ValidationFailed: If the batch is empty, too large or malformed
            PermissionDenied: If the requester cannot manage sharing
        """
        request = self._build(
            BulkGrantRequest,
            {"assignments": [GrantItemRequest.from_request(item).model_dump() for item in requests]},
        )
        response = await self._send(
            "POST", f"{self._grants_path(document_id)}/bulk",
            json=request.model_dump(mode="json"), resource_key=ResourceKey.document(document_id),
        )
        try:
            payload = BulkUpsertPayload.model_validate(response.data)
        except PydanticValidationError as e:
            raise malformed_response(e, "bulk sharing") from e

        result = BulkUpsertResult(
            created=[item.to_grant() for item in payload.created],
            updated=[item.to_grant() for item in payload.updated],
            rejected=[item.to_rejected() for item in payload.failed],
        )
        for grant in result.created + result.updated:
            self._guard.record(grant.resource_key, grant.version)
        return result

    async def update_grant(
        self,
        document_id: str,
        user_id: str,
        access_level: Union[AccessLevel, str],
        observed_version: Version = None,
    ) -> Grant:
        request = self._build(GrantUpdateRequest, {"access_type": access_level})
        key = ResourceKey.grant(document_id, user_id)
        outcome = await self._guard.mutate(
            key,
            lambda headers: self._send(
                "PUT", self._grant_path(document_id, user_id),
                json=request.model_dump(mode="json"), headers=headers, resource_key=key,
            ),
            observed_version,
        )
        try:
            return GrantPayload.model_validate(outcome.data).to_grant()
        except PydanticValidationError as e:
            raise malformed_response(e, "grant") from e

    async def revoke_grant(self, document_id: str, user_id: str, observed_version: Version = None) -> None:
        key = ResourceKey.grant(document_id, user_id)
        await self._guard.mutate(
            key,
            lambda headers: self._send("DELETE", self._grant_path(document_id, user_id), headers=headers, resource_key=key),
            observed_version,
        )
        self._guard.forget(key)
        logger.info(f"Revoked grant of user {user_id} on document {document_id}")

    async def _send(
        self,
        method: str,
        path: str,
        *,
        resource_key: Optional[ResourceKey] = None,
        json: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        files: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        response = await self._transport(method, path, json=json, params=params, headers=headers, files=files)
        raise_for_response(response, resource_key)
        return response

    def _document(self, data: Any, version: Optional[VersionToken]) -> DocumentRecord:
        try:
            return DocumentPayload.model_validate(data).to_record(version)
        except PydanticValidationError as e:
            raise malformed_response(e, "document") from e

    @staticmethod
    def _build(model: type, value: Any) -> BaseModel:
        if isinstance(value, model):
            return value
        try:
            return model.model_validate(dict(value))
        except PydanticValidationError as e:
            raise validation_failed_from_pydantic(e) from e

    def _document_path(self, document_id: str) -> str:
        return f"{self._base_path}/{document_id}"

    def _grants_path(self, document_id: str) -> str:
        return f"{self._document_path(document_id)}/assignments"

    def _grant_path(self, document_id: str, user_id: str) -> str:
        return f"{self._grants_path(document_id)}/{user_id}"
