from uuid import uuid4

import pytest

from src.app.services.errors import UpstreamUnavailableError
from src.app.services.identity_provider import RealmRoleRef
from src.app.services.role_synchronizer import (
    MANAGED_REALM_ROLES,
    RealmRoleSynchronizer,
    RoleSnapshot,
    build_desired_realm_roles,
)
from src.domain.entities import IdentityLink, WorkspaceMember, WorkspaceRole


@pytest.mark.parametrize(
    "snapshot, expected",
    [
        (None, []),
        (RoleSnapshot(), []),
        (RoleSnapshot(is_super_admin=True), ["app_super_admin"]),
        (
            RoleSnapshot(workspace_roles={WorkspaceRole.viewer, WorkspaceRole.admin}),
            ["app_workspace_admin", "app_workspace_viewer"],
        ),
        (
            RoleSnapshot(
                is_super_admin=True,
                workspace_roles={WorkspaceRole.editor},
            ),
            ["app_super_admin", "app_workspace_editor"],
        ),
    ],
)
def test_desired_realm_roles(snapshot, expected):
    assert build_desired_realm_roles(snapshot) == expected


@pytest.mark.asyncio
async def test_sync_adds_missing_and_removes_stale_managed_roles(idp):
    """Only the managed universe is diffed; other realm roles are untouched"""
    # Arrange
    user_id = "kc-1"
    idp.user_roles[user_id] = [
        RealmRoleRef(id="r-offline", name="offline_access"),
        RealmRoleRef(id="role-app_workspace_viewer", name="app_workspace_viewer"),
    ]

    # Act
    result = await RealmRoleSynchronizer(idp).sync_roles(
        user_id, ["app_workspace_admin", "not_managed_role"]
    )

    # Assert
    assert result.is_ok()
    assert result.value.added == ["app_workspace_admin"]
    assert result.value.removed == ["app_workspace_viewer"]
    assert result.value.changed
    assert idp.role_names(user_id) == ["app_workspace_admin", "offline_access"]
    assert set(idp.roles) == set(MANAGED_REALM_ROLES)


@pytest.mark.asyncio
async def test_sync_skips_empty_batches(idp):
    user_id = "kc-2"
    idp.user_roles[user_id] = [
        RealmRoleRef(id="role-app_super_admin", name="app_super_admin"),
    ]

    result = await RealmRoleSynchronizer(idp).sync_roles(user_id, ["app_super_admin"])

    assert result.is_ok()
    assert not result.value.changed
    assert idp.add_calls == []
    assert idp.remove_calls == []


@pytest.mark.asyncio
async def test_sync_with_empty_desired_set_removes_only_managed(idp):
    user_id = "kc-3"
    idp.user_roles[user_id] = [
        RealmRoleRef(id="r-uma", name="uma_authorization"),
        RealmRoleRef(id="role-app_workspace_editor", name="app_workspace_editor"),
    ]

    result = await RealmRoleSynchronizer(idp).sync_roles(user_id, [])

    assert result.is_ok()
    assert result.value.removed == ["app_workspace_editor"]
    assert idp.role_names(user_id) == ["uma_authorization"]


@pytest.mark.asyncio
async def test_sync_reports_upstream_failure(idp):
    idp.fail_with = UpstreamUnavailableError("Failed to reach Keycloak API.", 503)

    result = await RealmRoleSynchronizer(idp).sync_roles("kc-4", ["app_super_admin"])

    assert result.is_err()
    assert result.error.code == "UPSTREAM_UNAVAILABLE"


@pytest.mark.asyncio
async def test_sync_reports_unconfigured_realm():
    from tests.utils.fakes import FakeIdentityProvider

    result = await RealmRoleSynchronizer(FakeIdentityProvider(configured=False)).sync_roles(
        "kc-5", []
    )

    assert result.is_err()
    assert result.error.code == "IDP_NOT_CONFIGURED"


@pytest.mark.asyncio
async def test_sync_user_uses_identity_link_and_internal_state(mock_uow, idp):
    # Arrange
    user_id = uuid4()
    mock_uow.identity_links.get_by_user_id.return_value = IdentityLink(
        user_id=user_id, external_user_id="kc-6", email="user@example.com"
    )
    mock_uow.super_admins.is_super_admin.return_value = True
    mock_uow.memberships.get_by_user_id.return_value = [
        WorkspaceMember(workspace_id=uuid4(), user_id=user_id, role=WorkspaceRole.editor)
    ]

    # Act
    result = await RealmRoleSynchronizer(idp).sync_user(mock_uow, user_id)

    # Assert
    assert result.is_ok()
    assert idp.role_names("kc-6") == ["app_super_admin", "app_workspace_editor"]


@pytest.mark.asyncio
async def test_sync_user_without_link_or_resolver_is_not_found(mock_uow, idp):
    result = await RealmRoleSynchronizer(idp).sync_user(mock_uow, uuid4())

    assert result.is_err()
    assert result.error.code == "NOT_FOUND"
    assert idp.add_calls == []
