from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.membership_repository import IMembershipRepository
from src.domain.entities import WorkspaceMember, WorkspaceRole


class MembershipRepository(IMembershipRepository):
    """Workspace membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_workspace(
        self, user_id: UUID, workspace_id: UUID
    ) -> Optional[WorkspaceMember]:
        """Get membership by user and workspace"""
        stmt = select(WorkspaceMember).where(
            WorkspaceMember.user_id == user_id,
            WorkspaceMember.workspace_id == workspace_id,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> List[WorkspaceMember]:
        """Get all memberships for a user"""
        stmt = select(WorkspaceMember).where(WorkspaceMember.user_id == user_id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_user_ids(self, user_ids: List[UUID]) -> List[WorkspaceMember]:
        """Get all memberships for a set of users"""
        unique_ids = list(set(user_ids))
        if not unique_ids:
            return []
        stmt = select(WorkspaceMember).where(WorkspaceMember.user_id.in_(unique_ids))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_workspace_id(self, workspace_id: UUID) -> List[WorkspaceMember]:
        """Get all memberships for a workspace"""
        stmt = (
            select(WorkspaceMember)
            .where(WorkspaceMember.workspace_id == workspace_id)
            .order_by(WorkspaceMember.created_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def upsert(
        self,
        workspace_id: UUID,
        user_id: UUID,
        role: WorkspaceRole,
        group_id: Optional[UUID],
    ) -> WorkspaceMember:
        """Create the membership or update role/group of the existing one"""
        membership = await self.get_by_user_and_workspace(user_id, workspace_id)
        if membership is None:
            membership = WorkspaceMember(
                workspace_id=workspace_id,
                user_id=user_id,
                role=role,
                group_id=group_id,
            )
        else:
            membership.role = role
            membership.group_id = group_id
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Remove a user from every workspace"""
        stmt = delete(WorkspaceMember).where(WorkspaceMember.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount or 0
