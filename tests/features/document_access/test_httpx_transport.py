"""Tests for the httpx transport adapter."""

import httpx
import pytest

from famdocs import FamdocsSettings, TransportError
from famdocs.platform.document_access import HttpxTransport


def make_transport(handler, auth_token=None):
    client = httpx.AsyncClient(base_url="http://docs.test/api", transport=httpx.MockTransport(handler))
    return HttpxTransport("http://docs.test/api", auth_token=auth_token, client=client)


class TestHttpxTransport:

    @pytest.mark.asyncio
    async def test_passes_status_body_and_headers_through(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(412, json={"message": "stale"}, headers={"ETag": '"20240101T000000Z"'})

        transport = make_transport(handler)
        response = await transport("PATCH", "/v1/documents/doc-1", json={"title": "x"},
                                   headers={"If-Match": '"20231231T000000Z"'})

        assert response.status_code == 412
        assert response.body == {"message": "stale"}
        assert response.headers["etag"] == '"20240101T000000Z"'
        assert seen[0].headers["if-match"] == '"20231231T000000Z"'
        assert seen[0].url.path == "/api/v1/documents/doc-1"

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        transport = make_transport(handler, auth_token="secret")
        response = await transport("DELETE", "/v1/documents/doc-1")

        assert seen[0].headers["authorization"] == "Bearer secret"
        assert response.body is None

    @pytest.mark.asyncio
    async def test_text_body_kept_as_text(self):
        transport = make_transport(lambda request: httpx.Response(502, text="Bad Gateway"))

        response = await transport("GET", "/v1/documents/doc-1")

        assert response.body == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_query_params_forwarded(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"data": {"items": []}})

        transport = make_transport(handler)
        await transport("GET", "/v1/documents/doc-1/assignments", params={"page": 2, "page_size": 10})

        assert seen[0].url.params["page"] == "2"
        assert seen[0].url.params["page_size"] == "10"

    @pytest.mark.asyncio
    async def test_connection_error_becomes_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_transport(handler)

        with pytest.raises(TransportError) as exc_info:
            await transport("GET", "/v1/documents/doc-1")

        assert exc_info.value.details["path"] == "/v1/documents/doc-1"

    @pytest.mark.asyncio
    async def test_from_settings_owns_its_client(self):
        settings = FamdocsSettings(api_base_url="http://docs.test/api/", auth_token="abc")

        async with HttpxTransport.from_settings(settings) as transport:
            assert str(transport._client.base_url) == "http://docs.test/api/"
            assert transport._client.headers["authorization"] == "Bearer abc"
