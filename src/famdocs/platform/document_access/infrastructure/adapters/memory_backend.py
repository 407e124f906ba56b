"""In-memory document service.

ONLY a Transport that serves the document service API from process memory.
Used for tests and local development; it enforces the same version
preconditions, sharing policy and error bodies as the real service.

Every write moves ``updated_at`` forward by at least one second so that
second-precision version tokens always differ between writes.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from operator import attrgetter
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .....config import DowngradePolicy, ErrorCodes, Headers
from .....core.exceptions import FamdocsError, get_http_status_code
from .....utils import utc_now
from ...application.services import GrantUpsertEngine, ensure_can_perform, resolve
from ...core.entities import DocumentRecord, Grant, GrantStore
from ...core.exceptions import (
    FieldIssue,
    MissingVersionToken,
    NotFound,
    PermissionDenied,
    PreconditionFailed,
    ValidationFailed,
)
from ...core.protocols import TransportResponse
from ...core.value_objects import (
    AccessLevel,
    Actor,
    ActorRole,
    DocumentAction,
    ResourceKey,
    ResourceKind,
    VersionToken,
)

logger = logging.getLogger(__name__)

_ROUTES: List[Tuple[str, str, str]] = [
    ("GET", r"^/v1/documents/(?P<document_id>[^/]+)$", "_get_document"),
    ("PATCH", r"^/v1/documents/(?P<document_id>[^/]+)$", "_update_document"),
    ("DELETE", r"^/v1/documents/(?P<document_id>[^/]+)$", "_delete_document"),
    ("PUT", r"^/v1/documents/(?P<document_id>[^/]+)/file$", "_replace_file"),
    ("GET", r"^/v1/documents/(?P<document_id>[^/]+)/assignments$", "_list_grants"),
    ("POST", r"^/v1/documents/(?P<document_id>[^/]+)/assignments/bulk$", "_upsert_grants"),
    ("PUT", r"^/v1/documents/(?P<document_id>[^/]+)/assignments/(?P<user_id>[^/]+)$", "_update_grant"),
    ("DELETE", r"^/v1/documents/(?P<document_id>[^/]+)/assignments/(?P<user_id>[^/]+)$", "_revoke_grant"),
    ("GET", r"^/v1/families/(?P<family_id>[^/]+)$", "_get_family"),
    ("PATCH", r"^/v1/families/(?P<family_id>[^/]+)$", "_update_family"),
    ("GET", r"^/v1/families/(?P<family_id>[^/]+)/users/(?P<user_id>[^/]+)$", "_get_user"),
    ("PATCH", r"^/v1/families/(?P<family_id>[^/]+)/users/(?P<user_id>[^/]+)$", "_update_user"),
    ("PUT", r"^/v1/roles/families/(?P<family_id>[^/]+)/users/(?P<user_id>[^/]+)/?$", "_update_user_roles"),
]

_DOCUMENT_FIELDS = ("title", "category_id", "subcategory_id", "expiry_date", "details_json")

_GRANT_SORT_KEYS: Dict[str, Callable[[Grant], Any]] = {
    "assigned_at": attrgetter("assigned_at"),
    "updated_at": attrgetter("updated_at"),
    "access_type": lambda grant: grant.access_level.rank,
}


@dataclass
class RecordedRequest:
    """A request as the backend received it."""

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    json: Any = None
    params: Dict[str, Any] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class InMemoryDocumentBackend:
    """Document service stand-in implementing the ``Transport`` protocol.

    Seed it with ``add_family``, ``add_user`` and ``add_document``, pick the
    requesting user with ``act_as``, then hand it to the gateways.
    """

    def __init__(
        self,
        downgrade_policy: DowngradePolicy = DowngradePolicy.RETAIN,
        clock: Callable[[], datetime] = utc_now,
        version_header: str = Headers.ETAG,
        precondition_header: str = Headers.IF_MATCH,
    ):
        self._clock = clock
        self._last_write: Optional[datetime] = None
        self._version_header = version_header
        self._precondition_header = precondition_header
        self._routes = [(method, re.compile(pattern), name) for method, pattern, name in _ROUTES]

        self.engine = GrantUpsertEngine(downgrade_policy=downgrade_policy, clock=self.tick)
        self.grants = GrantStore()
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.families: Dict[str, Dict[str, Any]] = {}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.requests: List[RecordedRequest] = []
        self.current_user_id: Optional[str] = None

    # Seeding

    def add_family(self, family_id: str, name: str = "", **fields: Any) -> Dict[str, Any]:
        row = {"id": family_id, "name": name or family_id, "is_del": False, **fields}
        row["updated_at"] = self.tick()
        self.families[family_id] = row
        return self._public(row)

    def add_user(self, user_id: str, family_id: Optional[str], role: ActorRole = ActorRole.MEMBER,
                 **fields: Any) -> Dict[str, Any]:
        role = ActorRole(role)
        row = {
            "id": user_id,
            "family_id": family_id,
            "roles": [role.value],
            "is_del": False,
            **fields,
        }
        row["updated_at"] = self.tick()
        self.users[user_id] = row
        return self._public(row)

    def add_document(self, document_id: str, family_id: str, owner_user_id: str, title: str = "",
                     file_path: Optional[str] = None, **fields: Any) -> Dict[str, Any]:
        row = {
            "id": document_id,
            "family_id": family_id,
            "owner_user_id": owner_user_id,
            "title": title or document_id,
            "file_path": file_path if file_path is not None else f"/files/{document_id}/original",
            "is_del": False,
            **fields,
        }
        row["updated_at"] = self.tick()
        self.documents[document_id] = row
        return self._public(row)

    def add_grant(self, document_id: str, user_id: str, access_level: AccessLevel = AccessLevel.VIEWER,
                  granted_by: Optional[str] = None) -> Grant:
        now = self.tick()
        grant = Grant(
            document_id=document_id,
            user_id=user_id,
            access_level=access_level,
            granted_by=granted_by or self.documents[document_id]["owner_user_id"],
            assigned_at=now,
            updated_at=now,
        )
        return self.grants.add(grant)

    def act_as(self, user_id: Optional[str]) -> 'InMemoryDocumentBackend':
        self.current_user_id = user_id
        return self

    def as_actor(self, user_id: str) -> Actor:
        row = self.users[user_id]
        return Actor.create(user_id, row["roles"][0], row.get("family_id"))

    def member_families(self) -> Dict[str, str]:
        return {
            user_id: row["family_id"]
            for user_id, row in self.users.items()
            if row.get("family_id") and not row.get("is_del")
        }

    def touch_document(self, document_id: str, **fields: Any) -> Dict[str, Any]:
        """Change a document out of band, as another session would."""
        row = self.documents[document_id]
        row.update(fields)
        row["updated_at"] = self.tick()
        return self._public(row)

    def version_of(self, key: ResourceKey) -> VersionToken:
        """Current version of a stored resource."""
        return self._current_version(key)

    def tick(self) -> datetime:
        """Write timestamp, truncated to seconds and strictly increasing."""
        now = self._clock().replace(microsecond=0)
        if self._last_write is not None and now <= self._last_write:
            now = self._last_write + timedelta(seconds=1)
        self._last_write = now
        return now

    # Transport

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
        request = RecordedRequest(method.upper(), path, dict(headers or {}), json, dict(params or {}))
        self.requests.append(request)

        for route_method, pattern, name in self._routes:
            match = pattern.match(path)
            if match and route_method == request.method:
                break
        else:
            return self._error_response(404, ErrorCodes.NOT_FOUND, f"No route for {method} {path}")

        try:
            actor = self._current_actor()
            handler = getattr(self, name)
            return handler(actor, request, files=files, **match.groupdict())
        except MissingVersionToken as e:
            return self._error_response(428, ErrorCodes.PRECONDITION_REQUIRED, e.message)
        except ValidationFailed as e:
            details = [{"field": issue.field, "issue": issue.issue} for issue in e.issues]
            return self._error_response(get_http_status_code(e), e.error_code, e.message, details)
        except FamdocsError as e:
            return self._error_response(get_http_status_code(e), e.error_code, e.message)

    # Documents

    def _get_document(self, actor: Actor, request: RecordedRequest, document_id: str, **_) -> TransportResponse:
        record = self._document_record(document_id)
        permission = resolve(actor, record, self.grants)
        ensure_can_perform(DocumentAction.VIEW, permission, actor, record.state, document_id=document_id)
        return self._document_response(document_id, actor)

    def _update_document(self, actor: Actor, request: RecordedRequest, document_id: str, **_) -> TransportResponse:
        record = self._document_record(document_id)
        self._ensure(actor, record, DocumentAction.EDIT_METADATA)
        self._check_precondition(request, ResourceKey.document(document_id))

        body = request.json or {}
        unknown = sorted(set(body) - set(_DOCUMENT_FIELDS))
        if unknown:
            raise ValidationFailed(
                "Some fields cannot be changed.",
                issues=[FieldIssue(name, "Field is not editable") for name in unknown],
            )
        if "title" in body and not str(body["title"] or "").strip():
            raise ValidationFailed.for_field("title", "Title is required.")

        row = self.documents[document_id]
        row.update(body)
        row["updated_at"] = self.tick()
        logger.debug(f"Document {document_id} updated by {actor}")
        return self._document_response(document_id, actor, "Document updated successfully")

    def _replace_file(self, actor: Actor, request: RecordedRequest, document_id: str,
                      files: Optional[Mapping[str, Any]] = None, **_) -> TransportResponse:
        record = self._document_record(document_id)
        self._ensure(actor, record, DocumentAction.REPLACE_FILE)
        self._check_precondition(request, ResourceKey.document(document_id))
        if not files or "file" not in files:
            raise ValidationFailed.for_field("file", "A file is required.")

        upload = files["file"]
        filename = upload[0] if isinstance(upload, tuple) and upload else "upload"
        row = self.documents[document_id]
        row["file_path"] = f"/files/{document_id}/{filename}"
        row["updated_at"] = self.tick()
        return self._document_response(document_id, actor, "File replaced successfully")

    def _delete_document(self, actor: Actor, request: RecordedRequest, document_id: str, **_) -> TransportResponse:
        record = self._document_record(document_id)
        self._ensure(actor, record, DocumentAction.DELETE)
        self._check_precondition(request, ResourceKey.document(document_id))

        row = self.documents[document_id]
        row["is_del"] = True
        row["updated_at"] = self.tick()
        logger.debug(f"Document {document_id} soft-deleted by {actor}")
        return TransportResponse(200, {"data": None, "message": "Document deleted successfully"})

    # Grants

    def _list_grants(self, actor: Actor, request: RecordedRequest, document_id: str, **_) -> TransportResponse:
        record = self._document_record(document_id)
        self._ensure(actor, record, DocumentAction.MANAGE_SHARING)

        params = request.params
        page = int(params.get("page", 1))
        page_size = int(params.get("page_size", 20))
        if page < 1 or page_size < 1:
            raise ValidationFailed.for_field("page", "Page and page size must be positive.")

        items = self.grants.active_grants(document_id)
        if params.get("access_type"):
            wanted = AccessLevel.parse(params["access_type"])
            items = [grant for grant in items if grant.access_level is wanted]

        sort_key = _GRANT_SORT_KEYS.get(params.get("sort_by", "assigned_at"))
        if sort_key is None:
            raise ValidationFailed.for_field("sort_by", "Unsupported sort field.")
        items = sorted(items, key=sort_key, reverse=params.get("sort_order", "desc") == "desc")

        total = len(items)
        total_pages = (total + page_size - 1) // page_size
        start = (page - 1) * page_size
        return TransportResponse(200, {
            "data": {
                "items": [grant.to_dict() for grant in items[start:start + page_size]],
                "total": total,
                "page": page,
                "page_size": page_size,
                "total_pages": total_pages,
                "next_page": str(page + 1) if page < total_pages else None,
                "prev_page": str(page - 1) if page > 1 else None,
            },
            "message": "Assignments retrieved successfully",
        })

    def _upsert_grants(self, actor: Actor, request: RecordedRequest, document_id: str, **_) -> TransportResponse:
        record = self._document_record(document_id)
        body = request.json or {}
        items = body.get("assignments")
        if not isinstance(items, list):
            raise ValidationFailed.for_field("assignments", "A list of assignments is required.")

        result = self.engine.upsert_batch(record, actor, items, self.grants, self.member_families())
        return TransportResponse(200, {
            "data": {
                "created": [grant.to_dict() for grant in result.created],
                "updated": [grant.to_dict() for grant in result.updated],
                "failed": [
                    {
                        "user_id": item.user_id,
                        "access_type": item.access_level.value,
                        "error": item.message,
                        "code": item.reason_code,
                    }
                    for item in result.rejected
                ],
            },
            "message": "Assignments processed",
        })

    def _update_grant(self, actor: Actor, request: RecordedRequest, document_id: str, user_id: str,
                      **_) -> TransportResponse:
        record = self._document_record(document_id)
        self._ensure(actor, record, DocumentAction.MANAGE_SHARING)
        self._check_precondition(request, ResourceKey.grant(document_id, user_id))

        body = request.json or {}
        try:
            level = AccessLevel.parse(body.get("access_type"))
        except ValueError as e:
            raise ValidationFailed.for_field("access_type", str(e)) from e

        grant = self.engine.update_grant(record, actor, user_id, level, self.grants, self.member_families())
        return TransportResponse(
            200,
            {"data": grant.to_dict(), "message": "Assignment updated successfully"},
            {self._version_header: grant.version.to_if_match()},
        )

    def _revoke_grant(self, actor: Actor, request: RecordedRequest, document_id: str, user_id: str,
                      **_) -> TransportResponse:
        record = self._document_record(document_id)
        self._ensure(actor, record, DocumentAction.MANAGE_SHARING)
        self._check_precondition(request, ResourceKey.grant(document_id, user_id))
        self.engine.revoke_grant(record, actor, user_id, self.grants)
        return TransportResponse(200, {"data": None, "message": "Assignment removed successfully"})

    # Directory

    def _get_family(self, actor: Actor, request: RecordedRequest, family_id: str, **_) -> TransportResponse:
        row = self._family_row(family_id)
        if actor.role is not ActorRole.SUPER_ADMIN and actor.family_id != family_id:
            raise PermissionDenied("You do not belong to this family.", actor_id=actor.id)
        return self._versioned_response(row, ResourceKey.family(family_id))

    def _update_family(self, actor: Actor, request: RecordedRequest, family_id: str, **_) -> TransportResponse:
        row = self._family_row(family_id)
        self._ensure_directory_admin(actor, family_id)
        self._check_precondition(request, ResourceKey.family(family_id))
        row.update({k: v for k, v in (request.json or {}).items() if k not in ("id", "updated_at")})
        row["updated_at"] = self.tick()
        return self._versioned_response(row, ResourceKey.family(family_id), "Family updated successfully")

    def _get_user(self, actor: Actor, request: RecordedRequest, family_id: str, user_id: str,
                  **_) -> TransportResponse:
        row = self._user_row(family_id, user_id)
        if actor.role is not ActorRole.SUPER_ADMIN and actor.family_id != family_id:
            raise PermissionDenied("You do not belong to this family.", actor_id=actor.id)
        return self._versioned_response(row, ResourceKey.user(family_id, user_id))

    def _update_user(self, actor: Actor, request: RecordedRequest, family_id: str, user_id: str,
                     **_) -> TransportResponse:
        row = self._user_row(family_id, user_id)
        if actor.id != user_id:
            self._ensure_directory_admin(actor, family_id)
        self._check_precondition(request, ResourceKey.user(family_id, user_id))
        protected = ("id", "family_id", "roles", "updated_at")
        row.update({k: v for k, v in (request.json or {}).items() if k not in protected})
        row["updated_at"] = self.tick()
        return self._versioned_response(row, ResourceKey.user(family_id, user_id), "User updated successfully")

    def _update_user_roles(self, actor: Actor, request: RecordedRequest, family_id: str, user_id: str,
                           **_) -> TransportResponse:
        row = self._user_row(family_id, user_id)
        self._ensure_directory_admin(actor, family_id)
        self._check_precondition(request, ResourceKey.user(family_id, user_id))

        roles = (request.json or {}).get("roles") or []
        try:
            parsed = [ActorRole(role) for role in roles]
        except ValueError as e:
            raise ValidationFailed.for_field("roles", str(e)) from e
        if not parsed:
            raise ValidationFailed.for_field("roles", "At least one role is required.")

        row["roles"] = [role.value for role in parsed]
        row["updated_at"] = self.tick()
        return self._versioned_response(row, ResourceKey.user(family_id, user_id), "Roles updated successfully")

    # Helpers

    def _current_actor(self) -> Actor:
        if self.current_user_id is None or self.current_user_id not in self.users:
            raise PermissionDenied("No authenticated user.")
        return self.as_actor(self.current_user_id)

    def _document_record(self, document_id: str) -> DocumentRecord:
        row = self.documents.get(document_id)
        if row is None or row["is_del"]:
            raise NotFound("Document not found.", resource_key=ResourceKey.document(document_id))
        return DocumentRecord(
            id=row["id"],
            family_id=row["family_id"],
            owner_user_id=row["owner_user_id"],
            is_deleted=row["is_del"],
            title=row["title"],
            has_file=bool(row.get("file_path")),
            updated_at=row["updated_at"],
        )

    def _family_row(self, family_id: str) -> Dict[str, Any]:
        row = self.families.get(family_id)
        if row is None or row.get("is_del"):
            raise NotFound("Family not found.", resource_key=ResourceKey.family(family_id))
        return row

    def _user_row(self, family_id: str, user_id: str) -> Dict[str, Any]:
        row = self.users.get(user_id)
        if row is None or row.get("is_del") or row.get("family_id") != family_id:
            raise NotFound("User not found.", resource_key=ResourceKey.user(family_id, user_id))
        return row

    def _ensure(self, actor: Actor, record: DocumentRecord, action: DocumentAction) -> None:
        permission = resolve(actor, record, self.grants)
        ensure_can_perform(action, permission, actor, record.state, document_id=record.id)

    def _ensure_directory_admin(self, actor: Actor, family_id: str) -> None:
        if actor.role is ActorRole.SUPER_ADMIN or actor.is_family_admin_of(family_id):
            return
        raise PermissionDenied("Only a family admin can change this.", actor_id=actor.id)

    def _current_version(self, key: ResourceKey) -> VersionToken:
        if key.kind is ResourceKind.DOCUMENT:
            row = self.documents.get(key.identifier)
        elif key.kind is ResourceKind.FAMILY:
            row = self.families.get(key.identifier)
        elif key.kind is ResourceKind.USER:
            row = self.users.get(key.identifier.split("/", 1)[-1])
        else:
            document_id, user_id = key.identifier.split("/", 1)
            grant = self.grants.active_grant(document_id, user_id)
            if grant is None:
                raise NotFound("Assignment not found or has been removed.", resource_key=key)
            return grant.version
        if row is None:
            raise NotFound(f"{key} not found.", resource_key=key)
        return VersionToken.from_timestamp(row["updated_at"])

    def _check_precondition(self, request: RecordedRequest, key: ResourceKey) -> None:
        presented = VersionToken.from_header(request.header(self._precondition_header))
        if presented is None:
            raise MissingVersionToken(key)
        current = self._current_version(key)
        if not current.matches(presented):
            logger.debug(f"Rejecting write to {key}: presented {presented}, current {current}")
            raise PreconditionFailed(resource_key=key, expected_version=presented)

    def _document_response(self, document_id: str, actor: Actor,
                           message: str = "Document retrieved successfully") -> TransportResponse:
        row = self.documents[document_id]
        payload = self._public(row)
        grant = self.grants.active_grant(document_id, actor.id)
        payload["permission"] = grant.access_level.value if grant else (
            "owner" if actor.id == row["owner_user_id"] else None
        )
        return TransportResponse(
            200,
            {"data": payload, "message": message},
            {self._version_header: VersionToken.from_timestamp(row["updated_at"]).to_if_match()},
        )

    def _versioned_response(self, row: Dict[str, Any], key: ResourceKey,
                            message: str = "Retrieved successfully") -> TransportResponse:
        return TransportResponse(
            200,
            {"data": self._public(row), "message": message},
            {self._version_header: self._current_version(key).to_if_match()},
        )

    @staticmethod
    def _public(row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            key: value.isoformat().replace("+00:00", "Z") if isinstance(value, datetime) else value
            for key, value in row.items()
        }

    @staticmethod
    def _error_response(status: int, code: Optional[str], message: str,
                        details: Optional[List[Dict[str, str]]] = None) -> TransportResponse:
        body = {"error": {"code": code or "UNKNOWN_ERROR", "details": details or []}, "message": message}
        return TransportResponse(status, body)
