"""
List Received Invites Use Case

Pending invites addressed to the caller's email.
"""

import logging
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.entities import AuditEvent, InviteRevokedReason, normalize_email
from src.libs.result import Result, Return

from .dtos import ListReceivedInvitesResponse, ReceivedInvite

logger = logging.getLogger(__name__)


class ListReceivedInvitesUseCase:
    """
    Use case for the invitee view.

    Stale pending rows are revoked as expired before the listing, so only
    pending, unexpired invites are returned.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, user_email: str) -> Result[ListReceivedInvitesResponse]:
        email_normalized = normalize_email(user_email)
        if not email_normalized:
            return Return.ok(ListReceivedInvitesResponse(invites=[]))

        async with self.uow:
            now = utcnow()
            live = []
            expired_count = 0
            for invite in await self.uow.invites.get_pending_by_email(email_normalized):
                if invite.is_expired(now):
                    invite.mark_revoked(InviteRevokedReason.expired, now)
                    await self.uow.invites.update(invite)
                    await self.uow.audit_events.create(
                        AuditEvent(
                            workspace_id=invite.workspace_id,
                            user_id=user_id,
                            action="invite_expired",
                            event_metadata={"invite_id": str(invite.id)},
                        )
                    )
                    expired_count += 1
                else:
                    live.append(invite)

            if expired_count:
                await self.uow.commit()
                logger.info(f"Revoked {expired_count} expired invites for {email_normalized}")

            workspace_names = await self.uow.workspaces.get_names(
                [invite.workspace_id for invite in live]
            )
            inviters = await self.uow.profiles.get_many([invite.invited_by for invite in live])

            invites = []
            for invite in live:
                inviter = inviters.get(invite.invited_by)
                invites.append(
                    ReceivedInvite(
                        token=invite.token,
                        workspace_id=str(invite.workspace_id),
                        workspace_name=workspace_names.get(invite.workspace_id, "Workspace"),
                        role=invite.role.value,
                        inviter_email=inviter.email if inviter else None,
                        inviter_display_name=inviter.display_name if inviter else None,
                        created_at=invite.created_at,
                        expires_at=invite.expires_at,
                    )
                )

            return Return.ok(ListReceivedInvitesResponse(invites=invites))
