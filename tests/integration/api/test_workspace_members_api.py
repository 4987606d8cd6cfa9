import pytest
from httpx import AsyncClient

from src.domain.entities import WorkspaceRole
from tests.utils.auth import auth_headers
from tests.utils.seed import seed_membership, seed_user, seed_workspace
from tests.utils.settings import RESERVE_ADMIN_EMAIL


@pytest.mark.asyncio
async def test_members_listing_never_shows_reserve_admin(client: AsyncClient, db_session, directory):
    """A stale reserve-admin membership stays invisible to assignee pickers"""
    # Arrange
    owner_id = await seed_user(db_session, directory, "owner@example.com", "Olive Owner")
    workspace_id = await seed_workspace(db_session, owner_id)
    member_id = await seed_user(db_session, directory, "member@example.com")
    await seed_membership(db_session, workspace_id, member_id, WorkspaceRole.viewer)
    reserve_id = await seed_user(db_session, directory, RESERVE_ADMIN_EMAIL.upper())
    await seed_membership(db_session, workspace_id, reserve_id, WorkspaceRole.admin)

    # Act
    response = await client.post(
        "/workspaces/members/list",
        json={"workspaceId": str(workspace_id)},
        headers=auth_headers(member_id, "member@example.com"),
    )

    # Assert
    assert response.status_code == 200
    data = response.json()
    assert data["workspaceId"] == str(workspace_id)
    members = {member["userId"]: member for member in data["members"]}
    assert set(members) == {str(owner_id), str(member_id)}
    assert members[str(owner_id)]["role"] == "admin"
    assert members[str(owner_id)]["displayName"] == "Olive Owner"


@pytest.mark.asyncio
async def test_members_listing_requires_membership(client: AsyncClient, db_session, directory):
    owner_id = await seed_user(db_session, directory, "owner@example.com")
    workspace_id = await seed_workspace(db_session, owner_id)
    outsider_id = await seed_user(db_session, directory, "outsider@example.com")

    response = await client.post(
        "/workspaces/members/list",
        json={"workspaceId": str(workspace_id)},
        headers=auth_headers(outsider_id, "outsider@example.com"),
    )

    assert response.status_code == 403
