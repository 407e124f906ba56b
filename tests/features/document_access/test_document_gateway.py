"""Tests for the document gateway over the in-memory backend."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from famdocs.core.exceptions import TransportError
from famdocs.platform.document_access import (
    AccessLevel,
    DocumentGateway,
    GrantRequest,
    MissingVersionToken,
    NotFound,
    PermissionDenied,
    PreconditionFailed,
    ResourceKey,
    TransportResponse,
    ValidationFailed,
    VersionToken,
)

from conftest import DOCUMENT_ID, OWNER_ID, USER_X, USER_Y

DOC_KEY = ResourceKey.document(DOCUMENT_ID)


@pytest.fixture
def gateway(backend, guard):
    return DocumentGateway(backend, guard)


class TestDocuments:
    """Document reads and guarded writes."""

    @pytest.mark.asyncio
    async def test_get_document_records_version(self, gateway, backend, guard):
        record = await gateway.get_document(DOCUMENT_ID)

        assert record.id == DOCUMENT_ID
        assert record.owner_user_id == OWNER_ID
        assert record.has_file
        assert record.version == backend.version_of(DOC_KEY)
        assert guard.observed(DOC_KEY) == record.version

    @pytest.mark.asyncio
    async def test_update_document_returns_new_version(self, gateway, backend):
        before = await gateway.get_document(DOCUMENT_ID)

        after = await gateway.update_document(DOCUMENT_ID, {"title": "Renewed passport"})

        assert after.title == "Renewed passport"
        assert after.version != before.version
        assert after.version == backend.version_of(DOC_KEY)
        assert backend.requests[-1].header("If-Match") == before.version.to_if_match()

    @pytest.mark.asyncio
    async def test_consecutive_writes_without_reread(self, gateway):
        await gateway.get_document(DOCUMENT_ID)

        await gateway.update_document(DOCUMENT_ID, {"title": "One"})
        second = await gateway.update_document(DOCUMENT_ID, {"title": "Two"})

        assert second.title == "Two"

    @pytest.mark.asyncio
    async def test_stale_version_rejected(self, gateway, backend, clock):
        clock.now = datetime(2024, 1, 2, tzinfo=timezone.utc)
        backend.touch_document(DOCUMENT_ID)
        assert backend.version_of(DOC_KEY).value == "20240102T000000Z"

        with pytest.raises(PreconditionFailed) as exc_info:
            await gateway.update_document(DOCUMENT_ID, {"title": "Lost"}, observed_version="20240101T000000Z")

        assert exc_info.value.resource_key == DOC_KEY
        assert backend.documents[DOCUMENT_ID]["title"] == "Passport"
        assert backend.version_of(DOC_KEY).value == "20240102T000000Z"

    @pytest.mark.asyncio
    async def test_unknown_field_rejected_locally(self, gateway, backend):
        await gateway.get_document(DOCUMENT_ID)
        sent = len(backend.requests)

        with pytest.raises(ValidationFailed) as exc_info:
            await gateway.update_document(DOCUMENT_ID, {"owner_user_id": USER_X})

        assert "owner_user_id" in exc_info.value.issues_by_field()
        assert len(backend.requests) == sent

    @pytest.mark.asyncio
    async def test_write_without_read_fails_before_io(self, gateway, backend):
        with pytest.raises(MissingVersionToken):
            await gateway.update_document(DOCUMENT_ID, {"title": "x"})

        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_replace_file(self, gateway, backend):
        before = await gateway.get_document(DOCUMENT_ID)

        after = await gateway.replace_file(DOCUMENT_ID, ("scan.pdf", b"%PDF", "application/pdf"))

        assert after.has_file
        assert backend.documents[DOCUMENT_ID]["file_path"] == f"/files/{DOCUMENT_ID}/scan.pdf"
        assert after.version != before.version

    @pytest.mark.asyncio
    async def test_delete_document_hides_it(self, gateway, guard):
        await gateway.get_document(DOCUMENT_ID)

        await gateway.delete_document(DOCUMENT_ID)

        assert guard.observed(DOC_KEY) is None
        with pytest.raises(NotFound):
            await gateway.get_document(DOCUMENT_ID)

    @pytest.mark.asyncio
    async def test_viewer_cannot_edit(self, gateway, backend):
        backend.add_grant(DOCUMENT_ID, USER_X, AccessLevel.VIEWER)
        backend.act_as(USER_X)
        record = await gateway.get_document(DOCUMENT_ID)

        assert record.granted_access is AccessLevel.VIEWER
        with pytest.raises(PermissionDenied):
            await gateway.update_document(DOCUMENT_ID, {"title": "x"})


class TestGrants:
    """Grant listing, bulk upsert, update and revoke."""

    @pytest.mark.asyncio
    async def test_upsert_and_list_grants(self, gateway, guard):
        result = await gateway.upsert_grants(DOCUMENT_ID, [
            GrantRequest(USER_X, AccessLevel.VIEWER),
            GrantRequest(USER_Y, AccessLevel.EDITOR),
            GrantRequest(OWNER_ID, AccessLevel.VIEWER),
        ])

        assert [grant.user_id for grant in result.created] == [USER_X, USER_Y]
        assert [item.reason_code for item in result.rejected] == ["SELF_ASSIGNMENT"]

        page = await gateway.list_grants(DOCUMENT_ID, {"sort_by": "assigned_at", "sort_order": "asc"})

        assert page.user_ids() == [USER_X, USER_Y]
        assert page.total == 2
        for grant in page.items:
            assert guard.observed(grant.resource_key) == grant.version

    @pytest.mark.asyncio
    async def test_list_grants_filters_by_level(self, gateway, backend):
        backend.add_grant(DOCUMENT_ID, USER_X, AccessLevel.VIEWER)
        backend.add_grant(DOCUMENT_ID, USER_Y, AccessLevel.EDITOR)

        page = await gateway.list_grants(DOCUMENT_ID, {"access_type": "editor"})

        assert page.user_ids() == [USER_Y]

    @pytest.mark.asyncio
    async def test_list_grants_rejects_bad_page_size(self, gateway):
        with pytest.raises(ValidationFailed) as exc_info:
            await gateway.list_grants(DOCUMENT_ID, {"page_size": 500})

        assert "page_size" in exc_info.value.issues_by_field()

    @pytest.mark.asyncio
    async def test_bulk_over_limit_rejected_locally(self, gateway, backend):
        requests = [GrantRequest(f"user-{i}", AccessLevel.VIEWER) for i in range(101)]

        with pytest.raises(ValidationFailed):
            await gateway.upsert_grants(DOCUMENT_ID, requests)
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_update_grant_uses_grant_version(self, gateway, backend):
        backend.add_grant(DOCUMENT_ID, USER_X, AccessLevel.VIEWER)
        await gateway.list_grants(DOCUMENT_ID)

        grant = await gateway.update_grant(DOCUMENT_ID, USER_X, "editor")

        assert grant.access_level is AccessLevel.EDITOR
        assert backend.grants.access_level_for(DOCUMENT_ID, USER_X) is AccessLevel.EDITOR

    @pytest.mark.asyncio
    async def test_update_grant_downgrade_is_retained(self, gateway, backend):
        backend.add_grant(DOCUMENT_ID, USER_X, AccessLevel.EDITOR)
        await gateway.list_grants(DOCUMENT_ID)

        grant = await gateway.update_grant(DOCUMENT_ID, USER_X, AccessLevel.VIEWER)

        assert grant.access_level is AccessLevel.EDITOR

    @pytest.mark.asyncio
    async def test_update_grant_stale_version(self, gateway, backend):
        backend.add_grant(DOCUMENT_ID, USER_X, AccessLevel.VIEWER)
        await gateway.list_grants(DOCUMENT_ID)
        backend.grants.active_grant(DOCUMENT_ID, USER_X).change_level(AccessLevel.EDITOR, at=backend.tick())

        with pytest.raises(PreconditionFailed):
            await gateway.update_grant(DOCUMENT_ID, USER_X, AccessLevel.EDITOR)

    @pytest.mark.asyncio
    async def test_revoke_grant(self, gateway, backend, guard):
        backend.add_grant(DOCUMENT_ID, USER_X, AccessLevel.VIEWER)
        await gateway.list_grants(DOCUMENT_ID)

        await gateway.revoke_grant(DOCUMENT_ID, USER_X)

        assert backend.grants.active_grant(DOCUMENT_ID, USER_X) is None
        assert guard.observed(ResourceKey.grant(DOCUMENT_ID, USER_X)) is None
        page = await gateway.list_grants(DOCUMENT_ID)
        assert page.items == []


class TestErrorMapping:
    """Status codes become typed exceptions."""

    @pytest.mark.parametrize("status,exception", [
        (412, PreconditionFailed),
        (422, ValidationFailed),
        (400, ValidationFailed),
        (403, PermissionDenied),
        (404, NotFound),
        (500, TransportError),
        (409, TransportError),
    ])
    @pytest.mark.asyncio
    async def test_status_mapping(self, guard, status, exception):
        body = {"error": {"code": "X", "details": [{"field": "title", "issue": "Required"}]}, "message": "nope"}
        gateway = DocumentGateway(AsyncMock(return_value=TransportResponse(status, body)), guard)
        guard.record(DOC_KEY, VersionToken("v1"))

        with pytest.raises(exception):
            await gateway.update_document(DOCUMENT_ID, {"title": "x"})

    @pytest.mark.asyncio
    async def test_validation_issues_are_mapped_to_fields(self, guard):
        body = {
            "error": {"code": "VALIDATION_ERROR", "details": [{"field": "title", "issue": "Title is required"}]},
            "message": "Validation failed",
        }
        gateway = DocumentGateway(AsyncMock(return_value=TransportResponse(422, body)), guard)
        guard.record(DOC_KEY, VersionToken("v1"))

        with pytest.raises(ValidationFailed) as exc_info:
            await gateway.update_document(DOCUMENT_ID, {"title": "x"})

        assert exc_info.value.message == "Validation failed"
        assert exc_info.value.issues_by_field() == {"title": ["Title is required"]}
        assert guard.observed(DOC_KEY) == VersionToken("v1")

    @pytest.mark.asyncio
    async def test_malformed_success_body(self):
        transport = AsyncMock(return_value=TransportResponse(200, {"data": {"unexpected": True}}))

        with pytest.raises(TransportError):
            await DocumentGateway(transport).get_document(DOCUMENT_ID)

    @pytest.mark.asyncio
    async def test_transport_is_called_with_precondition(self, guard):
        data = {"id": DOCUMENT_ID, "family_id": "fam-1", "owner_user_id": OWNER_ID, "updated_at": "2024-01-03T00:00:00Z"}
        transport = AsyncMock(return_value=TransportResponse(200, {"data": data}))
        guard.record(DOC_KEY, VersionToken("20240102T000000Z"))

        record = await DocumentGateway(transport, guard).update_document(DOCUMENT_ID, {"title": "New"})

        transport.assert_awaited_once_with(
            "PATCH", f"/v1/documents/{DOCUMENT_ID}",
            json={"title": "New"}, params=None,
            headers={"If-Match": '"20240102T000000Z"'}, files=None,
        )
        assert record.version == VersionToken("20240103T000000Z")

    @pytest.mark.asyncio
    async def test_delete_drops_recorded_token(self, mock_transport, guard, mocker):
        forget = mocker.spy(guard, "forget")
        guard.record(DOC_KEY, VersionToken("20240102T000000Z"))

        await DocumentGateway(mock_transport, guard).delete_document(DOCUMENT_ID)

        assert mock_transport.await_args.kwargs["headers"] == {"If-Match": '"20240102T000000Z"'}
        forget.assert_called_with(DOC_KEY)
        assert guard.observed(DOC_KEY) is None
