"""Concurrency guard.

ONLY optimistic concurrency - remembers the last observed version token per
resource, attaches it as the precondition of the next write, and captures
the new token from the write's own response.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from .....config import FamdocsSettings, Headers, get_settings
from ...core.exceptions import MissingVersionToken, PreconditionFailed
from ...core.protocols import TransportResponse
from ...core.value_objects import ResourceKey, VersionToken

logger = logging.getLogger(__name__)

Fetch = Callable[[], Awaitable[TransportResponse]]
Send = Callable[[Dict[str, str]], Awaitable[TransportResponse]]


@dataclass(frozen=True)
class MutationOutcome:
    """Successful write and the token it produced (None when the store sent none)."""

    response: TransportResponse
    new_version: Optional[VersionToken]

    @property
    def data(self) -> Any:
        return self.response.data


class ConcurrencyGuard:
    """Guards mutations of versioned resources.

    Token lifecycle per resource key:
    - captured on every successful read or write;
    - consumed by the next write attempt;
    - discarded when a write is rejected for a version mismatch, or when
      a write response carries no token, forcing a re-read.

    Mismatches are surfaced as PreconditionFailed and never retried.
    One guard instance belongs to one view or session.
    """

    def __init__(
        self,
        version_header: str = Headers.ETAG,
        precondition_header: str = Headers.IF_MATCH,
        timestamp_field: str = "updated_at",
    ):
        self._version_header = version_header
        self._precondition_header = precondition_header
        self._timestamp_field = timestamp_field
        self._tokens: Dict[ResourceKey, VersionToken] = {}

    @classmethod
    def from_settings(cls, settings: Optional[FamdocsSettings] = None) -> 'ConcurrencyGuard':
        settings = settings or get_settings()
        return cls(
            version_header=settings.version_header,
            precondition_header=settings.precondition_header,
        )

    def observed(self, key: ResourceKey) -> Optional[VersionToken]:
        """Last observed token for ``key``."""
        return self._tokens.get(key)

    def record(self, key: ResourceKey, token: Optional[VersionToken]) -> None:
        if token is None:
            self.forget(key)
            return
        logger.debug(f"Captured version {token} for {key}")
        self._tokens[key] = token

    def forget(self, key: ResourceKey) -> None:
        self._tokens.pop(key, None)

    def extract_version(self, response: TransportResponse) -> Optional[VersionToken]:
        """Token from the response header, else synthesized from the payload timestamp."""
        token = VersionToken.from_headers(response.headers, self._version_header)
        if token is not None:
            return token
        return self.version_from_payload(response.data)

    def version_from_payload(self, payload: Any) -> Optional[VersionToken]:
        if not isinstance(payload, Mapping):
            return None
        stamp = payload.get(self._timestamp_field)
        if not stamp:
            return None
        try:
            return VersionToken.from_timestamp(stamp)
        except (TypeError, ValueError):
            logger.warning(f"Cannot derive version from {self._timestamp_field}={stamp!r}")
            return None

    async def read(self, key: ResourceKey, fetch: Fetch) -> TransportResponse:
        """Perform a read and capture the resource's version."""
        response = await fetch()
        self.record(key, self.extract_version(response))
        return response

    async def mutate(
        self,
        key: ResourceKey,
        send: Send,
        observed_version: Union[VersionToken, str, None] = None,
    ) -> MutationOutcome:
        """Perform a write guarded by the observed version.

        ``send`` receives the precondition headers and performs the request.
        ``observed_version`` overrides the recorded token for this call.

        Raises:
            MissingVersionToken: If no version is known; raised before ``send`` runs
            PreconditionFailed: If the store reports a version mismatch
        """
        token = VersionToken.coerce(observed_version) or self._tokens.get(key)
        if token is None:
            raise MissingVersionToken(key)

        headers = {self._precondition_header: token.to_if_match()}
        try:
            response = await send(headers)
        except PreconditionFailed as e:
            self.forget(key)
            e.attach(key, token)
            logger.warning(f"Version mismatch on {key}: presented {token}; reload required")
            raise

        new_version = self.extract_version(response)
        self.record(key, new_version)
        if new_version is None:
            logger.debug(f"No version returned for {key}; next write requires a re-read")
        return MutationOutcome(response=response, new_version=new_version)
