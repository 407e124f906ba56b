"""Grant store entity.

ONLY the normalized grant model - who has what access to which document,
with at most one active grant per (document, user). Revoked grants stay in
history but are invisible to lookups and listings.

Following maximum separation architecture - one file = one purpose.
"""

import copy
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..exceptions import NotFound
from ..value_objects import AccessLevel, ResourceKey
from .grant import Grant


class GrantStore:
    """Normalized collection of grants.

    Features:
    - One active grant per (document_id, user_id), enforced on insert
    - Normalization of raw rows (editor beats viewer, newest wins on ties)
    - Tombstone history for revoked grants
    """

    def __init__(self, grants: Iterable[Grant] = ()):
        self._active: Dict[Tuple[str, str], Grant] = {}
        self._history: List[Grant] = []
        for grant in grants:
            self._absorb(grant)

    @classmethod
    def from_rows(cls, rows: Iterable[Grant]) -> 'GrantStore':
        """Build a normalized store from rows that may contain duplicates."""
        return cls(rows)

    def _absorb(self, grant: Grant) -> None:
        self._history.append(grant)
        if not grant.is_active():
            return

        current = self._active.get(grant.key)
        if current is None or self._prefer(grant, current):
            self._active[grant.key] = grant

    @staticmethod
    def _prefer(candidate: Grant, current: Grant) -> bool:
        if candidate.access_level is not current.access_level:
            return candidate.access_level.outranks(current.access_level)
        return candidate.updated_at > current.updated_at

    def active_grant(self, document_id: str, user_id: str) -> Optional[Grant]:
        return self._active.get((document_id, user_id))

    def access_level_for(self, document_id: str, user_id: str) -> Optional[AccessLevel]:
        grant = self.active_grant(document_id, user_id)
        return grant.access_level if grant else None

    def active_grants(self, document_id: Optional[str] = None) -> List[Grant]:
        """Active grants, optionally for one document, in insertion order."""
        return [
            grant for grant in self._active.values()
            if document_id is None or grant.document_id == document_id
        ]

    def history(self, document_id: Optional[str] = None) -> List[Grant]:
        """Every grant ever absorbed, including tombstones."""
        return [
            grant for grant in self._history
            if document_id is None or grant.document_id == document_id
        ]

    def add(self, grant: Grant) -> Grant:
        """Insert a new active grant.

        Raises:
            ValueError: If the grant is revoked or an active grant already exists
        """
        if not grant.is_active():
            raise ValueError("Cannot add a revoked grant")
        if grant.key in self._active:
            raise ValueError(
                f"User {grant.user_id} already has an active grant on document {grant.document_id}"
            )
        self._active[grant.key] = grant
        self._history.append(grant)
        return grant

    def revoke(self, document_id: str, user_id: str, revoked_by: Optional[str] = None,
               at: Optional[datetime] = None) -> Grant:
        """Tombstone the active grant for (document, user).

        Raises:
            NotFound: If no active grant exists
        """
        grant = self._active.pop((document_id, user_id), None)
        if grant is None:
            raise NotFound(
                f"No active grant for user {user_id} on document {document_id}",
                resource_key=ResourceKey.grant(document_id, user_id)
            )
        grant.revoke(revoked_by, at)
        return grant

    def copy(self) -> 'GrantStore':
        """Deep copy, for planning a batch without touching this store."""
        return copy.deepcopy(self)

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._active

    def __iter__(self) -> Iterator[Grant]:
        return iter(list(self._active.values()))

    def __len__(self) -> int:
        return len(self._active)

    def __repr__(self) -> str:
        return f"GrantStore(active={len(self._active)}, history={len(self._history)})"
