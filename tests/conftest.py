"""Pytest configuration and fixtures for famdocs tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from famdocs.config import FamdocsSettings
from famdocs.platform.document_access import (
    AccessLevel,
    Actor,
    ActorRole,
    ConcurrencyGuard,
    DocumentAccessModule,
    DocumentRecord,
    Grant,
    GrantStore,
    GrantUpsertEngine,
    InMemoryDocumentBackend,
    TransportResponse,
)

FAMILY_ID = "fam-1"
OTHER_FAMILY_ID = "fam-2"
DOCUMENT_ID = "doc-1"
OWNER_ID = "user-owner"
USER_X = "user-x"
USER_Y = "user-y"
ADMIN_ID = "user-admin"
OUTSIDER_ID = "user-outsider"
OTHER_ADMIN_ID = "user-other-admin"
SUPERADMIN_ID = "user-super"

START = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    """Fixed clock starting at 2024-01-01T00:00:00Z."""
    return FixedClock()


@pytest.fixture
def owner():
    return Actor.create(OWNER_ID, ActorRole.MEMBER, FAMILY_ID)


@pytest.fixture
def member_x():
    return Actor.create(USER_X, ActorRole.MEMBER, FAMILY_ID)


@pytest.fixture
def member_y():
    return Actor.create(USER_Y, ActorRole.MEMBER, FAMILY_ID)


@pytest.fixture
def family_admin():
    return Actor.create(ADMIN_ID, ActorRole.FAMILY_ADMIN, FAMILY_ID)


@pytest.fixture
def other_family_admin():
    return Actor.create(OTHER_ADMIN_ID, ActorRole.FAMILY_ADMIN, OTHER_FAMILY_ID)


@pytest.fixture
def outsider():
    return Actor.create(OUTSIDER_ID, ActorRole.MEMBER, OTHER_FAMILY_ID)


@pytest.fixture
def superadmin():
    return Actor.create(SUPERADMIN_ID, ActorRole.SUPER_ADMIN)


@pytest.fixture
def document():
    """Active document owned by ``owner`` in ``FAMILY_ID``."""
    return DocumentRecord(
        id=DOCUMENT_ID,
        family_id=FAMILY_ID,
        owner_user_id=OWNER_ID,
        title="Passport",
        has_file=True,
    )


@pytest.fixture
def member_families():
    return {
        OWNER_ID: FAMILY_ID,
        USER_X: FAMILY_ID,
        USER_Y: FAMILY_ID,
        ADMIN_ID: FAMILY_ID,
        OUTSIDER_ID: OTHER_FAMILY_ID,
        OTHER_ADMIN_ID: OTHER_FAMILY_ID,
    }


@pytest.fixture
def grant_store():
    return GrantStore()


@pytest.fixture
def engine(clock):
    return GrantUpsertEngine(clock=clock)


@pytest.fixture
def guard():
    return ConcurrencyGuard()


@pytest.fixture
def mock_transport():
    """Transport double answering 200 with an empty body."""
    return AsyncMock(return_value=TransportResponse(200, {"data": None, "message": "ok"}))


@pytest.fixture
def backend(clock):
    """In-memory document service with two families and one document."""
    backend = InMemoryDocumentBackend(clock=clock)
    backend.add_family(FAMILY_ID, name="Smith")
    backend.add_family(OTHER_FAMILY_ID, name="Jones")
    backend.add_user(OWNER_ID, FAMILY_ID, email="owner@example.com")
    backend.add_user(USER_X, FAMILY_ID, email="x@example.com")
    backend.add_user(USER_Y, FAMILY_ID, email="y@example.com")
    backend.add_user(ADMIN_ID, FAMILY_ID, ActorRole.FAMILY_ADMIN, email="admin@example.com")
    backend.add_user(OUTSIDER_ID, OTHER_FAMILY_ID, email="outsider@example.com")
    backend.add_user(OTHER_ADMIN_ID, OTHER_FAMILY_ID, ActorRole.FAMILY_ADMIN)
    backend.add_user(SUPERADMIN_ID, None, ActorRole.SUPER_ADMIN)
    backend.add_document(DOCUMENT_ID, FAMILY_ID, OWNER_ID, title="Passport")
    return backend.act_as(OWNER_ID)


@pytest.fixture
def settings():
    return FamdocsSettings(api_base_url="http://famdocs.test/api")


@pytest.fixture
def module(backend, settings):
    """Session wired over the in-memory backend."""
    return DocumentAccessModule(backend, settings)


def make_grant(user_id: str, level: AccessLevel = AccessLevel.VIEWER, document_id: str = DOCUMENT_ID,
               updated_at: datetime = START, revoked: bool = False) -> Grant:
    """Grant row helper."""
    return Grant(
        document_id=document_id,
        user_id=user_id,
        access_level=level,
        is_revoked=revoked,
        assigned_at=updated_at,
        updated_at=updated_at,
    )
