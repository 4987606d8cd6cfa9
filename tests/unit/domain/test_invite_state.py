from datetime import timedelta
from uuid import uuid4

import pytest

from src.domain.clock import utcnow
from src.domain.entities import (
    Accepted,
    InviteRevokedReason,
    InviteStatus,
    InviteTransitionError,
    Pending,
    Revoked,
    WorkspaceInvite,
    WorkspaceRole,
)


def make_invite(expires_in_days: int = 7) -> WorkspaceInvite:
    now = utcnow()
    return WorkspaceInvite(
        workspace_id=uuid4(),
        email="Invitee@Example.com",
        email_normalized="invitee@example.com",
        role=WorkspaceRole.editor,
        invited_by=uuid4(),
        created_at=now,
        updated_at=now,
        expires_at=now + timedelta(days=expires_in_days),
    )


def test_new_invite_is_pending_and_active():
    invite = make_invite()

    assert isinstance(invite.state, Pending)
    assert invite.is_pending
    assert invite.is_active()
    assert invite.display_status() == InviteStatus.pending
    assert invite.responded_at is None


def test_token_is_generated_and_unguessable():
    first = make_invite()
    second = make_invite()

    assert len(first.token) >= 32
    assert first.token != second.token


def test_accept_sets_single_terminal_field():
    invite = make_invite()
    at = utcnow()

    invite.mark_accepted(at)

    assert invite.state == Accepted(at=at)
    assert invite.accepted_at == at
    assert invite.revoked_at is None
    assert invite.display_status() == InviteStatus.accepted
    assert invite.responded_at == at


def test_revoke_records_reason():
    invite = make_invite()

    invite.mark_revoked(InviteRevokedReason.declined)

    assert isinstance(invite.state, Revoked)
    assert invite.state.reason == InviteRevokedReason.declined
    assert invite.accepted_at is None
    assert invite.display_status() == InviteStatus.declined


@pytest.mark.parametrize(
    "first, second",
    [
        ("accept", "accept"),
        ("accept", "revoke"),
        ("revoke", "accept"),
        ("revoke", "revoke"),
    ],
)
def test_terminal_state_is_never_left(first, second):
    invite = make_invite()
    transitions = {
        "accept": lambda: invite.mark_accepted(),
        "revoke": lambda: invite.mark_revoked(InviteRevokedReason.canceled),
    }
    transitions[first]()
    state_before = invite.state

    with pytest.raises(InviteTransitionError):
        transitions[second]()

    assert invite.state == state_before


def test_expired_pending_invite_displays_expired_but_stays_pending():
    invite = make_invite(expires_in_days=-1)

    assert invite.is_pending
    assert invite.is_expired()
    assert not invite.is_active()
    assert invite.display_status() == InviteStatus.expired


def test_expiry_boundary_is_inclusive():
    invite = make_invite()

    assert invite.is_expired(invite.expires_at)
    assert not invite.is_expired(invite.expires_at - timedelta(seconds=1))
