import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invite_repository import IInviteRepository, InviteConflictError
from src.domain.entities import WorkspaceInvite

logger = logging.getLogger(__name__)


class InviteRepository(IInviteRepository):
    """Workspace invite repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_token(self, token: str) -> Optional[WorkspaceInvite]:
        """Get invite by token"""
        stmt = select(WorkspaceInvite).where(WorkspaceInvite.token == token)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_pending_by_workspace_and_email(
        self, workspace_id: UUID, email_normalized: str
    ) -> List[WorkspaceInvite]:
        """Get non-terminal invites for a workspace and email, newest first"""
        stmt = (
            select(WorkspaceInvite)
            .where(
                WorkspaceInvite.workspace_id == workspace_id,
                WorkspaceInvite.email_normalized == email_normalized,
                WorkspaceInvite.accepted_at.is_(None),
                WorkspaceInvite.revoked_at.is_(None),
            )
            .order_by(WorkspaceInvite.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_pending_by_email(self, email_normalized: str) -> List[WorkspaceInvite]:
        """Get non-terminal invites addressed to an email, newest first"""
        stmt = (
            select(WorkspaceInvite)
            .where(
                WorkspaceInvite.email_normalized == email_normalized,
                WorkspaceInvite.accepted_at.is_(None),
                WorkspaceInvite.revoked_at.is_(None),
            )
            .order_by(WorkspaceInvite.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_sent_since(
        self, invited_by: UUID, since: datetime
    ) -> List[WorkspaceInvite]:
        """Get invites created by a user since a point in time, newest first"""
        stmt = (
            select(WorkspaceInvite)
            .where(
                WorkspaceInvite.invited_by == invited_by,
                WorkspaceInvite.created_at >= since,
            )
            .order_by(WorkspaceInvite.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, invite: WorkspaceInvite) -> WorkspaceInvite:
        """Insert a new invite; raises InviteConflictError on active duplicate"""
        try:
            async with self.session.begin_nested():
                self.session.add(invite)
                await self.session.flush()
        except IntegrityError as exc:
            logger.info(
                f"Invite insert conflict for workspace {invite.workspace_id}: {exc.orig}"
            )
            raise InviteConflictError(str(exc.orig)) from exc
        await self.session.refresh(invite)
        return invite

    async def update(self, invite: WorkspaceInvite) -> WorkspaceInvite:
        """Update existing invite"""
        self.session.add(invite)
        await self.session.flush()
        await self.session.refresh(invite)
        return invite
