from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.use_cases.invites import CancelInviteUseCase, DeclineInviteUseCase
from src.domain.clock import utcnow
from src.domain.entities import InviteRevokedReason, WorkspaceInvite, WorkspaceRole


def make_invite(invited_by=None):
    now = utcnow()
    return WorkspaceInvite(
        workspace_id=uuid4(),
        email="guest@example.com",
        email_normalized="guest@example.com",
        role=WorkspaceRole.viewer,
        invited_by=invited_by or uuid4(),
        created_at=now,
        updated_at=now,
        expires_at=now + timedelta(days=7),
    )


@pytest.mark.asyncio
async def test_invitee_declines_pending_invite(mock_uow):
    # Arrange
    invite = make_invite()
    mock_uow.invites.get_by_token.return_value = invite

    # Act
    result = await DeclineInviteUseCase(mock_uow).execute(uuid4(), "Guest@example.com", invite.token)

    # Assert
    assert result.is_ok()
    assert result.value.status == "declined"
    assert invite.revoked_reason == InviteRevokedReason.declined
    assert mock_uow.audit_events.create.await_args.args[0].action == "invite_declined"
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_decline_is_idempotent(mock_uow):
    invite = make_invite()
    invite.mark_revoked(InviteRevokedReason.declined)
    revoked_at = invite.revoked_at
    mock_uow.invites.get_by_token.return_value = invite

    result = await DeclineInviteUseCase(mock_uow).execute(uuid4(), "guest@example.com", invite.token)

    assert result.is_ok()
    assert result.value.status == "declined"
    assert invite.revoked_at == revoked_at
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_decline_by_other_email_is_forbidden(mock_uow):
    invite = make_invite()
    mock_uow.invites.get_by_token.return_value = invite

    result = await DeclineInviteUseCase(mock_uow).execute(uuid4(), "other@example.com", invite.token)

    assert result.is_err()
    assert result.error.code == "FORBIDDEN"
    assert invite.is_pending


@pytest.mark.asyncio
async def test_accepted_invite_cannot_be_declined(mock_uow):
    invite = make_invite()
    invite.mark_accepted()
    mock_uow.invites.get_by_token.return_value = invite

    result = await DeclineInviteUseCase(mock_uow).execute(uuid4(), "guest@example.com", invite.token)

    assert result.is_err()
    assert result.error.code == "INVITE_ALREADY_ACCEPTED"
    assert invite.revoked_at is None


@pytest.mark.asyncio
async def test_inviter_cancels_pending_invite(mock_uow):
    inviter_id = uuid4()
    invite = make_invite(invited_by=inviter_id)
    mock_uow.invites.get_by_token.return_value = invite

    result = await CancelInviteUseCase(mock_uow).execute(inviter_id, invite.token)

    assert result.is_ok()
    assert result.value.status == "canceled"
    assert invite.revoked_reason == InviteRevokedReason.canceled
    assert mock_uow.audit_events.create.await_args.args[0].action == "invite_canceled"


@pytest.mark.asyncio
async def test_cancel_after_decline_keeps_decline(mock_uow):
    inviter_id = uuid4()
    invite = make_invite(invited_by=inviter_id)
    invite.mark_revoked(InviteRevokedReason.declined)
    mock_uow.invites.get_by_token.return_value = invite

    result = await CancelInviteUseCase(mock_uow).execute(inviter_id, invite.token)

    assert result.is_ok()
    assert result.value.status == "declined"
    assert invite.revoked_reason == InviteRevokedReason.declined


@pytest.mark.asyncio
async def test_only_inviter_can_cancel(mock_uow):
    invite = make_invite()
    mock_uow.invites.get_by_token.return_value = invite

    result = await CancelInviteUseCase(mock_uow).execute(uuid4(), invite.token)

    assert result.is_err()
    assert result.error.code == "FORBIDDEN"
    assert invite.is_pending


@pytest.mark.asyncio
async def test_cancel_unknown_token(mock_uow):
    result = await CancelInviteUseCase(mock_uow).execute(uuid4(), "nope")

    assert result.is_err()
    assert result.error.code == "INVITE_NOT_FOUND"
