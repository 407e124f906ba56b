"""Permission resolver.

ONLY effective permission resolution - combines ownership, the family-admin
override and the normalized grant lookup into one EffectivePermission.

Pure and synchronous: never performs I/O and never raises for ordinary
inputs; an actor with no claim resolves to ``none``.
"""

from typing import Iterable, Optional, Union

from ...core.entities import DocumentRecord, Grant, GrantStore
from ...core.value_objects import AccessLevel, Actor, EffectivePermission

GrantLookup = Union[GrantStore, Iterable[Grant], None]


def _granted_level(document: DocumentRecord, actor: Actor, grants: GrantLookup) -> Optional[AccessLevel]:
    if grants is None:
        return None
    if not isinstance(grants, GrantStore):
        grants = GrantStore.from_rows(grants)
    return grants.access_level_for(document.id, actor.id)


def resolve(actor: Actor, document: DocumentRecord, grants: GrantLookup = None) -> EffectivePermission:
    """Resolve ``actor``'s effective permission on ``document``.

    Evaluated in fixed order, first match wins:
    1. deleted document -> none
    2. family admin of the document's family -> owner
    3. document owner -> owner
    4. active grant for (document, actor) -> its access level
    5. none
    """
    if document.is_deleted:
        return EffectivePermission.NONE

    if actor.is_family_admin_of(document.family_id):
        return EffectivePermission.OWNER

    if actor.id == document.owner_user_id:
        return EffectivePermission.OWNER

    # Grants never reach across families.
    if actor.family_id is not None and actor.family_id != document.family_id:
        return EffectivePermission.NONE

    return EffectivePermission.from_access_level(_granted_level(document, actor, grants))


def own_grant_lookup(actor: Actor, document: DocumentRecord) -> GrantStore:
    """Grant lookup built from the level the store reported for ``actor``.

    Members cannot list a document's grants; the document read tells them
    their own level instead.
    """
    if document.granted_access is None:
        return GrantStore()
    return GrantStore([Grant(document.id, actor.id, document.granted_access)])
