"""Transport protocol.

ONLY the request contract consumed from the transport collaborator - an
async request function returning status, body and headers. The version
token travels in the headers.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from typing_extensions import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    """Response returned by a transport."""

    status_code: int
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def data(self) -> Any:
        """Payload inside the ``{data, message}`` envelope, or the raw body."""
        if isinstance(self.body, Mapping) and "data" in self.body:
            return self.body["data"]
        return self.body

    @property
    def message(self) -> Optional[str]:
        if isinstance(self.body, Mapping):
            return self.body.get("message")
        return None

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in (self.headers or {}).items():
            if key.lower() == wanted:
                return value
        return None


@runtime_checkable
class Transport(Protocol):
    """Async request function.

    Implementations send one request and return the response without
    raising for HTTP error statuses; status mapping happens in the gateways.
    """

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
        """Send a request and return its response."""
        ...
