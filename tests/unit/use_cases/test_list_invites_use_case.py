from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.use_cases.invites import ListReceivedInvitesUseCase, ListSentInvitesUseCase
from src.domain.clock import utcnow
from src.domain.entities import InviteRevokedReason, Profile, WorkspaceInvite, WorkspaceRole


def make_invite(workspace_id=None, invited_by=None, expires_in_days=7, email="guest@example.com"):
    now = utcnow()
    return WorkspaceInvite(
        workspace_id=workspace_id or uuid4(),
        email=email,
        email_normalized=email.lower(),
        role=WorkspaceRole.viewer,
        invited_by=invited_by or uuid4(),
        created_at=now,
        updated_at=now,
        expires_at=now + timedelta(days=expires_in_days),
    )


@pytest.mark.asyncio
async def test_received_invites_exclude_and_revoke_expired(mock_uow):
    """Stale rows are revoked as expired and never listed"""
    # Arrange
    inviter_id = uuid4()
    live = make_invite(invited_by=inviter_id)
    stale = make_invite(expires_in_days=-1)
    mock_uow.invites.get_pending_by_email.return_value = [live, stale]
    mock_uow.workspaces.get_names.return_value = {live.workspace_id: "Acme"}
    mock_uow.profiles.get_many.return_value = {
        inviter_id: Profile(id=inviter_id, email="admin@example.com", display_name="Ada")
    }

    # Act
    result = await ListReceivedInvitesUseCase(mock_uow).execute(uuid4(), "GUEST@example.com")

    # Assert
    assert result.is_ok()
    invites = result.value.invites
    assert [invite.token for invite in invites] == [live.token]
    assert invites[0].workspace_name == "Acme"
    assert invites[0].inviter_email == "admin@example.com"
    assert invites[0].inviter_display_name == "Ada"

    assert stale.revoked_reason == InviteRevokedReason.expired
    assert mock_uow.audit_events.create.await_args.args[0].action == "invite_expired"
    mock_uow.commit.assert_awaited_once()
    mock_uow.invites.get_pending_by_email.assert_awaited_once_with("guest@example.com")


@pytest.mark.asyncio
async def test_received_invites_without_stale_rows_do_not_commit(mock_uow):
    mock_uow.invites.get_pending_by_email.return_value = [make_invite()]

    result = await ListReceivedInvitesUseCase(mock_uow).execute(uuid4(), "guest@example.com")

    assert len(result.value.invites) == 1
    assert result.value.invites[0].workspace_name == "Workspace"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_received_invites_for_blank_email_are_empty(mock_uow):
    result = await ListReceivedInvitesUseCase(mock_uow).execute(uuid4(), None)

    assert result.is_ok()
    assert result.value.invites == []
    mock_uow.invites.get_pending_by_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_sent_invites_report_derived_status(mock_uow):
    # Arrange
    inviter_id = uuid4()
    pending = make_invite(invited_by=inviter_id)
    accepted = make_invite(invited_by=inviter_id)
    accepted.mark_accepted()
    declined = make_invite(invited_by=inviter_id)
    declined.mark_revoked(InviteRevokedReason.declined)
    lapsed = make_invite(invited_by=inviter_id, expires_in_days=-1)
    mock_uow.invites.get_sent_since.return_value = [pending, accepted, declined, lapsed]

    # Act
    result = await ListSentInvitesUseCase(mock_uow, window_days=30).execute(inviter_id)

    # Assert
    statuses = [(invite.status, invite.is_pending) for invite in result.value.invites]
    assert statuses == [
        ("pending", True),
        ("accepted", False),
        ("declined", False),
        ("expired", False),
    ]
    assert result.value.invites[1].responded_at == accepted.accepted_at

    since = mock_uow.invites.get_sent_since.await_args.args[1]
    assert utcnow() - since >= timedelta(days=30)


@pytest.mark.asyncio
async def test_sent_invites_pending_only(mock_uow):
    inviter_id = uuid4()
    pending = make_invite(invited_by=inviter_id)
    canceled = make_invite(invited_by=inviter_id)
    canceled.mark_revoked(InviteRevokedReason.canceled)
    mock_uow.invites.get_sent_since.return_value = [pending, canceled]

    result = await ListSentInvitesUseCase(mock_uow).execute(inviter_id, pending_only=True)

    assert [invite.token for invite in result.value.invites] == [pending.token]
