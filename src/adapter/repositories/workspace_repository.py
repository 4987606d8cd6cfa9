from typing import Dict, List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.workspace_repository import IWorkspaceRepository
from src.domain.entities import MemberGroup, Workspace


class WorkspaceRepository(IWorkspaceRepository):
    """Workspace repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, workspace_id: UUID) -> Optional[Workspace]:
        """Get workspace by ID"""
        stmt = select(Workspace).where(Workspace.id == workspace_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_names(self, workspace_ids: List[UUID]) -> Dict[UUID, str]:
        """Map workspace IDs to names"""
        unique_ids = list(set(workspace_ids))
        if not unique_ids:
            return {}
        stmt = select(Workspace).where(Workspace.id.in_(unique_ids))
        result = await self.session.exec(stmt)
        return {workspace.id: workspace.name for workspace in result.all()}

    async def get_group(self, workspace_id: UUID, group_id: UUID) -> Optional[MemberGroup]:
        """Get a member group only if it belongs to the workspace"""
        stmt = select(MemberGroup).where(
            MemberGroup.id == group_id, MemberGroup.workspace_id == workspace_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()
