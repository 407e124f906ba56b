"""Grant request and bulk outcome value objects.

ONLY sharing request/outcome shapes - the (user, access level) pairs a
bulk upsert receives and the typed created/updated/rejected result it
returns. Partial failure is a result, never an exception.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Tuple, Union, TYPE_CHECKING

from .access_level import AccessLevel

if TYPE_CHECKING:
    from ..entities.grant import Grant


@dataclass(frozen=True)
class GrantRequest:
    """A requested (user, access level) pair."""

    user_id: str
    access_level: AccessLevel

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("Grant request user ID must be a non-empty string")
        object.__setattr__(self, 'access_level', AccessLevel.parse(self.access_level))

    @classmethod
    def coerce(cls, item: Union['GrantRequest', Tuple[str, Any], Mapping[str, Any]]) -> 'GrantRequest':
        """Accept a GrantRequest, a ``(user_id, level)`` tuple or a wire dict."""
        if isinstance(item, GrantRequest):
            return item
        if isinstance(item, Mapping):
            level = item.get("access_level", item.get("access_type"))
            return cls(item.get("user_id"), level)
        user_id, level = item
        return cls(user_id, level)


@dataclass(frozen=True)
class RejectedGrant:
    """A request item that failed a precondition."""

    user_id: str
    access_level: AccessLevel
    reason_code: str
    message: str = ""


@dataclass
class BulkUpsertResult:
    """Outcome of a bulk grant upsert."""

    created: List['Grant'] = field(default_factory=list)
    updated: List['Grant'] = field(default_factory=list)
    rejected: List[RejectedGrant] = field(default_factory=list)

    @property
    def succeeded_count(self) -> int:
        return len(self.created) + len(self.updated)

    @property
    def is_complete_success(self) -> bool:
        return not self.rejected

    @property
    def is_partial_failure(self) -> bool:
        return bool(self.rejected) and self.succeeded_count > 0

    @property
    def is_total_failure(self) -> bool:
        return bool(self.rejected) and self.succeeded_count == 0

    def merge(self, other: 'BulkUpsertResult') -> 'BulkUpsertResult':
        return BulkUpsertResult(
            created=self.created + other.created,
            updated=self.updated + other.updated,
            rejected=self.rejected + other.rejected,
        )


@dataclass(frozen=True)
class FailedRevoke:
    """A user whose grant could not be revoked."""

    user_id: str
    error_code: str
    message: str


@dataclass
class BulkRevokeResult:
    """Outcome of revoking several grants."""

    succeeded: List[str] = field(default_factory=list)
    failed: List[FailedRevoke] = field(default_factory=list)

    @property
    def is_complete_success(self) -> bool:
        return not self.failed

    @property
    def is_partial_failure(self) -> bool:
        return bool(self.failed) and bool(self.succeeded)

    @property
    def is_total_failure(self) -> bool:
        return bool(self.failed) and not self.succeeded
