"""
List Sent Invites Use Case

Invites the caller created within a recent window, with derived status.
"""

from datetime import timedelta
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.entities import InviteStatus
from src.libs.result import Result, Return

from .dtos import ListSentInvitesResponse, SentInvite

DEFAULT_SENT_WINDOW_DAYS = 90


class ListSentInvitesUseCase:
    def __init__(self, uow: UnitOfWork, window_days: int = DEFAULT_SENT_WINDOW_DAYS):
        self.uow = uow
        self.window_days = window_days

    async def execute(
        self, user_id: UUID, pending_only: bool = False
    ) -> Result[ListSentInvitesResponse]:
        """
        Execute list sent invites use case.

        Args:
            user_id: Inviter
            pending_only: Only return invites whose derived status is pending

        Returns:
            Result with ListSentInvitesResponse, newest first
        """
        async with self.uow:
            now = utcnow()
            rows = await self.uow.invites.get_sent_since(
                user_id, now - timedelta(days=self.window_days)
            )
            workspace_names = await self.uow.workspaces.get_names(
                [invite.workspace_id for invite in rows]
            )

            invites = []
            for invite in rows:
                status = invite.display_status(now)
                is_pending = status == InviteStatus.pending
                if pending_only and not is_pending:
                    continue
                invites.append(
                    SentInvite(
                        token=invite.token,
                        workspace_id=str(invite.workspace_id),
                        workspace_name=workspace_names.get(invite.workspace_id, "Workspace"),
                        email=invite.email,
                        role=invite.role.value,
                        status=status.value,
                        is_pending=is_pending,
                        created_at=invite.created_at,
                        responded_at=invite.responded_at,
                        expires_at=invite.expires_at,
                    )
                )

            return Return.ok(ListSentInvitesResponse(invites=invites))
