"""httpx transport adapter.

ONLY HTTP I/O - sends one request through ``httpx.AsyncClient`` and returns
status, decoded body and headers. Error statuses are returned, not raised.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .....config import FamdocsSettings, Headers, get_settings
from .....config.constants import ErrorCodes
from .....core.exceptions import TransportError
from ...core.protocols import TransportResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Transport backed by a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Accept": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout_seconds,
        )
        if not self._owns_client:
            self._client.headers.update(headers)

    @classmethod
    def from_settings(cls, settings: Optional[FamdocsSettings] = None, **kwargs) -> 'HttpxTransport':
        settings = settings or get_settings()
        return cls(
            base_url=settings.api_base_url,
            auth_token=settings.auth_token,
            timeout_seconds=settings.request_timeout_seconds,
            **kwargs
        )

    async def __call__(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        files: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=headers,
                files=files,
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(
                f"Request to document service failed: {e}",
                error_code=ErrorCodes.TRANSPORT_ERROR,
                details={"method": method, "path": path},
            ) from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        return TransportResponse(
            status_code=response.status_code,
            body=self._decode(response),
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> 'HttpxTransport':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        content_type = response.headers.get(Headers.CONTENT_TYPE, "")
        if "json" in content_type:
            try:
                return response.json()
            except (json.JSONDecodeError, ValueError):
                logger.warning(f"Invalid JSON body with status {response.status_code}")
        return response.text
