"""Tests for the grant upsert engine."""

import pytest

from famdocs.config import DowngradePolicy, ErrorCodes
from famdocs.platform.document_access import (
    AccessLevel,
    GrantRequest,
    GrantStore,
    GrantUpsertEngine,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)

from conftest import DOCUMENT_ID, OUTSIDER_ID, OWNER_ID, USER_X, USER_Y, make_grant


def levels(grants):
    return [(grant.user_id, grant.access_level) for grant in grants]


class TestUpsertBatch:
    """Per-item policy with partial success."""

    def test_owner_in_batch_is_rejected(self, engine, document, owner, member_families):
        store = GrantStore()
        items = [(USER_X, "viewer"), (USER_Y, "editor"), (OWNER_ID, "viewer")]

        result = engine.upsert_batch(document, owner, items, store, member_families)

        assert levels(result.created) == [(USER_X, AccessLevel.VIEWER), (USER_Y, AccessLevel.EDITOR)]
        assert result.updated == []
        assert [(item.user_id, item.reason_code) for item in result.rejected] == [
            (OWNER_ID, ErrorCodes.SELF_ASSIGNMENT)
        ]
        assert result.is_partial_failure
        assert store.active_grant(DOCUMENT_ID, OWNER_ID) is None

    def test_viewer_request_keeps_existing_editor(self, engine, document, owner, member_families):
        store = GrantStore([make_grant(USER_X, AccessLevel.EDITOR)])

        result = engine.upsert_batch(document, owner, [(USER_X, "viewer")], store, member_families)

        assert levels(result.updated) == [(USER_X, AccessLevel.EDITOR)]
        assert result.created == []
        assert result.is_complete_success
        assert store.access_level_for(DOCUMENT_ID, USER_X) is AccessLevel.EDITOR

    def test_apply_policy_writes_downgrade(self, clock, document, owner, member_families):
        engine = GrantUpsertEngine(downgrade_policy=DowngradePolicy.APPLY, clock=clock)
        store = GrantStore([make_grant(USER_X, AccessLevel.EDITOR)])

        result = engine.upsert_batch(document, owner, [(USER_X, "viewer")], store, member_families)

        assert levels(result.updated) == [(USER_X, AccessLevel.VIEWER)]
        assert store.access_level_for(DOCUMENT_ID, USER_X) is AccessLevel.VIEWER

    def test_viewer_upgraded_to_editor(self, engine, document, owner, member_families):
        store = GrantStore([make_grant(USER_X, AccessLevel.VIEWER)])

        result = engine.upsert_batch(document, owner, [(USER_X, "editor")], store, member_families)

        assert levels(result.updated) == [(USER_X, AccessLevel.EDITOR)]

    def test_cross_family_user_rejected(self, engine, document, owner, member_families):
        result = engine.upsert_batch(
            document, owner, [(OUTSIDER_ID, "viewer"), ("user-unknown", "viewer")], GrantStore(), member_families
        )

        assert [item.reason_code for item in result.rejected] == [ErrorCodes.CROSS_FAMILY] * 2
        assert result.is_total_failure

    def test_duplicates_in_one_batch_never_create_two_rows(self, engine, document, owner, member_families):
        store = GrantStore()

        result = engine.upsert_batch(
            document, owner, [(USER_X, "viewer"), (USER_X, "editor")], store, member_families
        )

        assert levels(result.created) == [(USER_X, AccessLevel.EDITOR)]
        assert result.created[0] is result.updated[0]
        assert len(store.active_grants(DOCUMENT_ID)) == 1

    def test_idempotent(self, engine, document, owner, member_families):
        store = GrantStore()
        items = [(USER_X, "viewer"), (USER_Y, "editor")]

        engine.upsert_batch(document, owner, items, store, member_families)
        snapshot = levels(store.active_grants(DOCUMENT_ID))
        second = engine.upsert_batch(document, owner, items, store, member_families)

        assert levels(store.active_grants(DOCUMENT_ID)) == snapshot
        assert second.created == []
        assert levels(second.updated) == snapshot

    def test_editor_never_downgraded_by_retain_batches(self, engine, document, owner, member_families):
        store = GrantStore([make_grant(USER_X, AccessLevel.EDITOR)])

        for level in ("viewer", "editor", "viewer"):
            engine.upsert_batch(document, owner, [(USER_X, level)], store, member_families)

        assert store.access_level_for(DOCUMENT_ID, USER_X) is AccessLevel.EDITOR

    def test_owner_never_holds_a_grant(self, engine, document, family_admin, member_families):
        store = GrantStore()

        engine.upsert_batch(document, family_admin, [(OWNER_ID, "editor")], store, member_families)

        assert all(grant.user_id != OWNER_ID for grant in store.active_grants())

    def test_round_trip_with_resolver(self, engine, document, owner, member_x, member_families):
        from famdocs.platform.document_access import EffectivePermission, resolve
        store = GrantStore()

        engine.upsert_batch(document, owner, [GrantRequest(USER_X, AccessLevel.VIEWER)], store, member_families)

        assert resolve(member_x, document, store) is EffectivePermission.VIEWER

    def test_family_admin_may_share(self, engine, document, family_admin, member_families):
        result = engine.upsert_batch(document, family_admin, [(USER_X, "viewer")], GrantStore(), member_families)

        assert len(result.created) == 1
        assert result.created[0].granted_by == family_admin.id


class TestBatchValidation:
    """Whole-batch failures happen before anything is touched."""

    def test_empty_batch(self, engine, document, owner, member_families):
        with pytest.raises(ValidationFailed) as exc_info:
            engine.upsert_batch(document, owner, [], GrantStore(), member_families)

        assert exc_info.value.issues_by_field().keys() == {"items"}

    def test_batch_over_limit(self, engine, document, owner, member_families):
        store = GrantStore()
        items = [(f"user-{i}", "viewer") for i in range(101)]

        with pytest.raises(ValidationFailed):
            engine.upsert_batch(document, owner, items, store, member_families)
        assert len(store) == 0

    def test_configured_limit_is_capped(self):
        assert GrantUpsertEngine(max_batch_size=500).max_batch_size == 100

    def test_malformed_item_points_at_its_index(self, engine, document, owner, member_families):
        store = GrantStore()

        with pytest.raises(ValidationFailed) as exc_info:
            engine.upsert_batch(document, owner, [(USER_X, "viewer"), (USER_Y, "admin")], store, member_families)

        assert [issue.field for issue in exc_info.value.issues] == ["items[1]"]
        assert len(store) == 0

    def test_requester_without_sharing_rights(self, engine, document, member_x, member_families):
        store = GrantStore([make_grant(USER_X, AccessLevel.EDITOR)])

        with pytest.raises(PermissionDenied):
            engine.upsert_batch(document, member_x, [(USER_Y, "viewer")], store, member_families)
        assert store.active_grant(DOCUMENT_ID, USER_Y) is None

    def test_deleted_document(self, engine, document, owner, member_families):
        with pytest.raises(PermissionDenied):
            engine.upsert_batch(document.soft_deleted(), owner, [(USER_X, "viewer")], GrantStore(), member_families)


class TestSingleGrantPaths:
    """Single update always retains editor; revoke tombstones."""

    def test_update_grant_retains_editor_even_with_apply_policy(self, clock, document, owner, member_families):
        engine = GrantUpsertEngine(downgrade_policy=DowngradePolicy.APPLY, clock=clock)
        store = GrantStore([make_grant(USER_X, AccessLevel.EDITOR)])

        grant = engine.update_grant(document, owner, USER_X, AccessLevel.VIEWER, store, member_families)

        assert grant.access_level is AccessLevel.EDITOR

    def test_update_grant_upgrades(self, engine, document, owner):
        store = GrantStore([make_grant(USER_X, AccessLevel.VIEWER)])

        grant = engine.update_grant(document, owner, USER_X, AccessLevel.EDITOR, store)

        assert grant.access_level is AccessLevel.EDITOR

    def test_update_grant_for_owner_is_invalid(self, engine, document, owner):
        with pytest.raises(ValidationFailed):
            engine.update_grant(document, owner, OWNER_ID, AccessLevel.EDITOR, GrantStore())

    def test_update_missing_grant(self, engine, document, owner):
        with pytest.raises(NotFound):
            engine.update_grant(document, owner, USER_X, AccessLevel.EDITOR, GrantStore())

    def test_revoke_grant(self, engine, document, owner):
        store = GrantStore([make_grant(USER_X)])

        revoked = engine.revoke_grant(document, owner, USER_X, store)

        assert revoked.is_revoked
        assert revoked.revoked_by == owner.id
        assert store.active_grant(DOCUMENT_ID, USER_X) is None
