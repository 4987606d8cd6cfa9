from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import WorkspaceMember, WorkspaceRole


class IMembershipRepository(ABC):
    """Workspace membership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_workspace(
        self, user_id: UUID, workspace_id: UUID
    ) -> Optional[WorkspaceMember]:
        """Get membership by user and workspace"""
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> List[WorkspaceMember]:
        """Get all memberships for a user"""
        pass

    @abstractmethod
    async def get_by_user_ids(self, user_ids: List[UUID]) -> List[WorkspaceMember]:
        """Get all memberships for a set of users"""
        pass

    @abstractmethod
    async def get_by_workspace_id(self, workspace_id: UUID) -> List[WorkspaceMember]:
        """Get all memberships for a workspace"""
        pass

    @abstractmethod
    async def upsert(
        self,
        workspace_id: UUID,
        user_id: UUID,
        role: WorkspaceRole,
        group_id: Optional[UUID],
    ) -> WorkspaceMember:
        """Create the membership or update role/group of the existing one"""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Remove a user from every workspace, returns removed row count"""
        pass
