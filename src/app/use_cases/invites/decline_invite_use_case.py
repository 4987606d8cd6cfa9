"""
Decline Invite Use Case
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    Accepted,
    AuditEvent,
    InviteRevokedReason,
    Revoked,
    normalize_email,
)
from src.libs.result import Error, Result, Return

from .dtos import InviteActionResponse


class DeclineInviteUseCase:
    """
    Use case for the invitee declining an invite.

    Business Rules:
    - Only the invited email can decline
    - An accepted invite cannot be declined
    - Declining an invite that is already terminal is a no-op success
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, user_email: str, token: str
    ) -> Result[InviteActionResponse]:
        if not token:
            return Return.err(Error("INVALID_ARGUMENT", "token is required"))

        async with self.uow:
            invite = await self.uow.invites.get_by_token(token)
            if invite is None:
                return Return.err(Error("INVITE_NOT_FOUND", "Invite not found."))

            if normalize_email(user_email) != invite.email_normalized:
                return Return.err(
                    Error("FORBIDDEN", "This invite was sent to a different email address.")
                )

            state = invite.state
            if isinstance(state, Accepted):
                return Return.err(
                    Error("INVITE_ALREADY_ACCEPTED", "Invite was already accepted.")
                )
            if isinstance(state, Revoked):
                return Return.ok(InviteActionResponse(status=state.reason.value))

            invite.mark_revoked(InviteRevokedReason.declined)
            await self.uow.invites.update(invite)
            await self.uow.audit_events.create(
                AuditEvent(
                    workspace_id=invite.workspace_id,
                    user_id=user_id,
                    action="invite_declined",
                    event_metadata={"invite_id": str(invite.id)},
                )
            )
            await self.uow.commit()

            return Return.ok(InviteActionResponse(status=InviteRevokedReason.declined.value))
