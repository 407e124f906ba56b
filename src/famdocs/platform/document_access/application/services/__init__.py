"""Document access application services."""

from .permission_resolver import GrantLookup, own_grant_lookup, resolve
from .access_gate import (
    DocumentCapabilities,
    can_create_document,
    can_list_documents,
    can_perform,
    capabilities,
    ensure_can_perform,
)
from .grant_upsert_engine import GrantUpsertEngine
from .concurrency_guard import ConcurrencyGuard, MutationOutcome

__all__ = [
    "GrantLookup",
    "own_grant_lookup",
    "resolve",
    "DocumentCapabilities",
    "can_create_document",
    "can_list_documents",
    "can_perform",
    "capabilities",
    "ensure_can_perform",
    "GrantUpsertEngine",
    "ConcurrencyGuard",
    "MutationOutcome",
]
