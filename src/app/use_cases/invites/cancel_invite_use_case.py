"""
Cancel Invite Use Case
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Accepted, AuditEvent, InviteRevokedReason, Revoked
from src.libs.result import Error, Result, Return

from .dtos import InviteActionResponse


class CancelInviteUseCase:
    """
    Use case for the inviter withdrawing an invite.

    Business Rules:
    - Only the user who created the invite can cancel it
    - An accepted invite cannot be canceled
    - Canceling an invite that is already terminal is a no-op success
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, token: str) -> Result[InviteActionResponse]:
        if not token:
            return Return.err(Error("INVALID_ARGUMENT", "token is required"))

        async with self.uow:
            invite = await self.uow.invites.get_by_token(token)
            if invite is None:
                return Return.err(Error("INVITE_NOT_FOUND", "Invite not found."))

            if invite.invited_by != user_id:
                return Return.err(Error("FORBIDDEN", "Only the inviter can cancel this invite."))

            state = invite.state
            if isinstance(state, Accepted):
                return Return.err(
                    Error("INVITE_ALREADY_ACCEPTED", "Invite was already accepted.")
                )
            if isinstance(state, Revoked):
                return Return.ok(InviteActionResponse(status=state.reason.value))

            invite.mark_revoked(InviteRevokedReason.canceled)
            await self.uow.invites.update(invite)
            await self.uow.audit_events.create(
                AuditEvent(
                    workspace_id=invite.workspace_id,
                    user_id=user_id,
                    action="invite_canceled",
                    event_metadata={"invite_id": str(invite.id)},
                )
            )
            await self.uow.commit()

            return Return.ok(InviteActionResponse(status=InviteRevokedReason.canceled.value))
