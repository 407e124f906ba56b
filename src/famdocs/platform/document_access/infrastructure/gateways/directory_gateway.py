"""Directory gateway.

ONLY family and member records. They are versioned resources like
documents, so their writes go through the same ConcurrencyGuard.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from ...application.services.concurrency_guard import ConcurrencyGuard
from ...core.protocols import Transport, TransportResponse
from ...core.value_objects import ResourceKey, VersionToken
from ..models import VersionedResourcePayload
from .error_mapping import malformed_response, raise_for_response

logger = logging.getLogger(__name__)

Version = Union[VersionToken, str, None]


class DirectoryGateway:
    """Family and member reads and guarded writes."""

    def __init__(
        self,
        transport: Transport,
        guard: Optional[ConcurrencyGuard] = None,
        families_path: str = "/v1/families",
        roles_path: str = "/v1/roles/families",
    ):
        self._transport = transport
        self._guard = guard or ConcurrencyGuard.from_settings()
        self._families_path = families_path.rstrip("/")
        self._roles_path = roles_path.rstrip("/")

    @property
    def guard(self) -> ConcurrencyGuard:
        return self._guard

    async def get_family(self, family_id: str) -> Dict[str, Any]:
        key = ResourceKey.family(family_id)
        return await self._read(key, self._family_path(family_id))

    async def update_family(self, family_id: str, fields: Mapping[str, Any],
                            observed_version: Version = None) -> Dict[str, Any]:
        key = ResourceKey.family(family_id)
        return await self._write(key, "PATCH", self._family_path(family_id), dict(fields), observed_version)

    async def get_user(self, family_id: str, user_id: str) -> Dict[str, Any]:
        key = ResourceKey.user(family_id, user_id)
        return await self._read(key, self._user_path(family_id, user_id))

    async def update_user(self, family_id: str, user_id: str, fields: Mapping[str, Any],
                          observed_version: Version = None) -> Dict[str, Any]:
        key = ResourceKey.user(family_id, user_id)
        return await self._write(key, "PATCH", self._user_path(family_id, user_id), dict(fields), observed_version)

    async def update_user_roles(self, family_id: str, user_id: str, roles: Sequence[str],
                                observed_version: Version = None) -> Dict[str, Any]:
        """Replace a member's roles. Guarded by the member's version."""
        key = ResourceKey.user(family_id, user_id)
        path = f"{self._roles_path}/{family_id}/users/{user_id}/"
        result = await self._write(key, "PUT", path, {"roles": list(roles)}, observed_version)
        logger.info(f"Updated roles of user {user_id} in family {family_id}: {list(roles)}")
        return result

    async def _read(self, key: ResourceKey, path: str) -> Dict[str, Any]:
        response = await self._guard.read(key, lambda: self._send("GET", path, key))
        return self._resource(response.data)

    async def _write(self, key: ResourceKey, method: str, path: str, body: Dict[str, Any],
                     observed_version: Version) -> Dict[str, Any]:
        outcome = await self._guard.mutate(
            key, lambda headers: self._send(method, path, key, json=body, headers=headers), observed_version
        )
        return self._resource(outcome.data)

    async def _send(self, method: str, path: str, key: ResourceKey, *, json: Optional[Any] = None,
                    headers: Optional[Dict[str, str]] = None) -> TransportResponse:
        response = await self._transport(method, path, json=json, headers=headers)
        raise_for_response(response, key)
        return response

    @staticmethod
    def _resource(data: Any) -> Dict[str, Any]:
        try:
            return VersionedResourcePayload.model_validate(data).as_dict()
        except PydanticValidationError as e:
            raise malformed_response(e, "directory") from e

    def _family_path(self, family_id: str) -> str:
        return f"{self._families_path}/{family_id}"

    def _user_path(self, family_id: str, user_id: str) -> str:
        return f"{self._family_path(family_id)}/users/{user_id}"
