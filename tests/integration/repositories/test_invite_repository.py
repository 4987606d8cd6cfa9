from datetime import timedelta
from uuid import uuid4

import pytest
from sqlmodel import select

from src.adapter.repositories.invite_repository import InviteRepository
from src.app.repositories.invite_repository import InviteConflictError
from src.domain.clock import utcnow
from src.domain.entities import InviteRevokedReason, Profile, WorkspaceInvite, WorkspaceRole
from tests.utils.seed import seed_workspace


def pending_invite(workspace_id, invited_by, email="guest@example.com"):
    now = utcnow()
    return WorkspaceInvite(
        workspace_id=workspace_id,
        email=email,
        email_normalized=email,
        role=WorkspaceRole.viewer,
        group_id=None,
        invited_by=invited_by,
        created_at=now,
        updated_at=now,
        expires_at=now + timedelta(days=7),
    )


@pytest.mark.asyncio
async def test_duplicate_active_invite_is_a_conflict(db_session):
    owner_id = uuid4()
    workspace_id = await seed_workspace(db_session, owner_id)
    repository = InviteRepository(db_session)
    await repository.create(pending_invite(workspace_id, owner_id))

    with pytest.raises(InviteConflictError):
        await repository.create(pending_invite(workspace_id, owner_id))


@pytest.mark.asyncio
async def test_conflict_keeps_earlier_writes_of_the_transaction(db_session):
    """Only the failed insert is undone; pending work in the session survives"""
    # Arrange
    owner_id = uuid4()
    workspace_id = await seed_workspace(db_session, owner_id)
    repository = InviteRepository(db_session)
    await repository.create(pending_invite(workspace_id, owner_id))
    await db_session.commit()

    profile_id = uuid4()
    db_session.add(Profile(id=profile_id, email="written@example.com"))
    await db_session.flush()

    # Act
    with pytest.raises(InviteConflictError):
        await repository.create(pending_invite(workspace_id, owner_id))
    await db_session.commit()

    # Assert
    result = await db_session.exec(select(Profile).where(Profile.id == profile_id))
    assert result.one().email == "written@example.com"
    result = await db_session.exec(
        select(WorkspaceInvite).where(WorkspaceInvite.workspace_id == workspace_id)
    )
    assert len(result.all()) == 1


@pytest.mark.asyncio
async def test_revoked_invite_frees_the_slot(db_session):
    owner_id = uuid4()
    workspace_id = await seed_workspace(db_session, owner_id)
    repository = InviteRepository(db_session)
    first = await repository.create(pending_invite(workspace_id, owner_id))
    first.mark_revoked(InviteRevokedReason.canceled)
    await repository.update(first)

    second = await repository.create(pending_invite(workspace_id, owner_id))

    assert second.id != first.id
