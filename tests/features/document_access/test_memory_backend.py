"""Tests for the in-memory document service."""

import pytest

from famdocs.platform.document_access import ResourceKey

from conftest import DOCUMENT_ID, USER_X


class TestInMemoryDocumentBackend:

    @pytest.mark.asyncio
    async def test_unknown_route_is_404(self, backend):
        response = await backend("GET", "/v1/nowhere")

        assert response.status_code == 404
        assert response.body["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_write_without_if_match_is_428(self, backend):
        response = await backend("PATCH", f"/v1/documents/{DOCUMENT_ID}", json={"title": "x"})

        assert response.status_code == 428
        assert response.body["error"]["code"] == "PRECONDITION_REQUIRED"

    @pytest.mark.asyncio
    async def test_stale_if_match_is_412(self, backend):
        response = await backend("PATCH", f"/v1/documents/{DOCUMENT_ID}", json={"title": "x"},
                                 headers={"If-Match": '"19990101T000000Z"'})

        assert response.status_code == 412
        assert backend.documents[DOCUMENT_ID]["title"] == "Passport"

    @pytest.mark.asyncio
    async def test_read_returns_quoted_etag(self, backend):
        response = await backend("GET", f"/v1/documents/{DOCUMENT_ID}")

        token = backend.version_of(ResourceKey.document(DOCUMENT_ID))
        assert response.headers["ETag"] == f'"{token}"'
        assert response.body["data"]["permission"] == "owner"

    @pytest.mark.asyncio
    async def test_member_without_grant_is_forbidden(self, backend):
        backend.act_as(USER_X)

        response = await backend("GET", f"/v1/documents/{DOCUMENT_ID}")

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, backend):
        token = backend.version_of(ResourceKey.document(DOCUMENT_ID))

        response = await backend("PATCH", f"/v1/documents/{DOCUMENT_ID}", json={"owner_user_id": USER_X},
                                 headers={"If-Match": token.to_if_match()})

        assert response.status_code == 422
        assert response.body["error"]["details"][0]["field"] == "owner_user_id"

    def test_tick_is_strictly_increasing(self, backend):
        first = backend.tick()
        second = backend.tick()

        assert second > first
        assert second.microsecond == 0
