"""Tests for the access gate."""

import pytest

from famdocs.platform.document_access import (
    Actor,
    ActorRole,
    DocumentAccess,
    DocumentAction,
    DocumentCapabilities,
    DocumentRecord,
    DocumentState,
    EffectivePermission,
    PermissionDenied,
    can_create_document,
    can_list_documents,
    can_perform,
    capabilities,
    ensure_can_perform,
)

ACTIVE = DocumentState.active()
DELETED = DocumentState.deleted()

OWNER = EffectivePermission.OWNER
EDITOR = EffectivePermission.EDITOR
VIEWER = EffectivePermission.VIEWER
NONE = EffectivePermission.NONE


class TestCanPerform:
    """Action requirements per permission."""

    @pytest.mark.parametrize("permission", [OWNER, EDITOR, VIEWER])
    @pytest.mark.parametrize("action", [
        DocumentAction.VIEW, DocumentAction.LIST, DocumentAction.PREVIEW, DocumentAction.DOWNLOAD,
    ])
    def test_read_actions_need_any_permission(self, permission, action):
        assert can_perform(action, permission, ActorRole.MEMBER, ACTIVE)

    @pytest.mark.parametrize("action", list(DocumentAction))
    def test_none_denies_everything(self, action):
        assert not can_perform(action, NONE, ActorRole.MEMBER, ACTIVE)

    @pytest.mark.parametrize("has_file", [True, False])
    def test_preview_and_download_ignore_file_metadata(self, has_file):
        owner = Actor.create("o1", ActorRole.MEMBER, "f1")
        document = DocumentRecord("d1", "f1", "o1", has_file=has_file)

        access = DocumentAccess.evaluate(owner, document)

        assert access.allows(DocumentAction.PREVIEW)
        assert access.allows(DocumentAction.DOWNLOAD)
        assert access.capabilities.can_preview
        assert access.capabilities.can_download

    @pytest.mark.parametrize("action", [DocumentAction.EDIT_METADATA, DocumentAction.REPLACE_FILE])
    def test_writes_need_owner_or_editor(self, action):
        assert can_perform(action, OWNER, ActorRole.MEMBER, ACTIVE)
        assert can_perform(action, EDITOR, ActorRole.MEMBER, ACTIVE)
        assert not can_perform(action, VIEWER, ActorRole.MEMBER, ACTIVE)

    def test_upload_needs_owner(self):
        assert can_perform(DocumentAction.UPLOAD_FILE, OWNER, ActorRole.MEMBER, ACTIVE)
        assert not can_perform(DocumentAction.UPLOAD_FILE, EDITOR, ActorRole.MEMBER, ACTIVE)

    @pytest.mark.parametrize("action", [DocumentAction.DELETE, DocumentAction.MANAGE_SHARING])
    def test_delete_and_sharing_need_owner_or_family_admin(self, action):
        assert can_perform(action, OWNER, ActorRole.MEMBER, ACTIVE)
        assert can_perform(action, VIEWER, ActorRole.FAMILY_ADMIN, ACTIVE)
        assert not can_perform(action, EDITOR, ActorRole.MEMBER, ACTIVE)
        assert not can_perform(action, VIEWER, ActorRole.MEMBER, ACTIVE)

    @pytest.mark.parametrize("action", list(DocumentAction))
    @pytest.mark.parametrize("permission", list(EffectivePermission))
    @pytest.mark.parametrize("role", list(ActorRole))
    def test_deleted_document_denies_every_action(self, action, permission, role):
        assert not can_perform(action, permission, role, DELETED)


class TestCapabilities:
    """Boolean capability set for UI enablement."""

    def test_viewer_capabilities(self):
        caps = capabilities(VIEWER, ActorRole.MEMBER, ACTIVE)

        assert caps == DocumentCapabilities(
            can_view=True, can_list=True, can_preview=True, can_download=True,
        )
        assert caps.allowed_actions() == frozenset({
            DocumentAction.VIEW, DocumentAction.LIST, DocumentAction.PREVIEW, DocumentAction.DOWNLOAD,
        })

    def test_owner_capabilities(self):
        caps = capabilities(OWNER, ActorRole.MEMBER, ACTIVE)

        assert caps.allowed_actions() == frozenset(DocumentAction)

    def test_editor_cannot_share_or_delete(self):
        caps = capabilities(EDITOR, ActorRole.MEMBER, ACTIVE)

        assert caps.can_edit_metadata and caps.can_replace_file
        assert not caps.can_delete
        assert not caps.can_manage_sharing
        assert not caps.allows(DocumentAction.UPLOAD_FILE)

    def test_deleted_document_has_no_capabilities(self):
        assert capabilities(OWNER, ActorRole.FAMILY_ADMIN, DELETED) == DocumentCapabilities()


class TestRoleChecks:
    """Create and list checks that need no document."""

    def test_can_create_document(self):
        assert can_create_document(ActorRole.MEMBER)
        assert can_create_document(ActorRole.FAMILY_ADMIN)
        assert not can_create_document(ActorRole.SUPER_ADMIN)
        assert not can_create_document(None)

    def test_can_list_documents(self):
        assert can_list_documents(ActorRole.MEMBER)
        assert can_list_documents(ActorRole.FAMILY_ADMIN)
        assert not can_list_documents(ActorRole.SUPER_ADMIN)


class TestEnsureCanPerform:
    """Raising form used on write paths."""

    def test_allowed_action_returns_none(self, owner):
        assert ensure_can_perform(DocumentAction.DELETE, OWNER, owner, ACTIVE, "doc-1") is None

    def test_denied_action_raises_and_logs(self, member_x, caplog):
        with pytest.raises(PermissionDenied) as exc_info:
            ensure_can_perform(DocumentAction.EDIT_METADATA, VIEWER, member_x, ACTIVE, "doc-1")

        error = exc_info.value
        assert error.action == "edit_metadata"
        assert error.actor_id == member_x.id
        assert error.document_id == "doc-1"
        assert error.error_code == "PERMISSION_DENIED"
        assert any(record.levelname == "WARNING" for record in caplog.records)
