from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import MemberGroup, Workspace


class IWorkspaceRepository(ABC):
    """Workspace repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, workspace_id: UUID) -> Optional[Workspace]:
        """Get workspace by ID"""
        pass

    @abstractmethod
    async def get_names(self, workspace_ids: List[UUID]) -> Dict[UUID, str]:
        """Map workspace IDs to names"""
        pass

    @abstractmethod
    async def get_group(self, workspace_id: UUID, group_id: UUID) -> Optional[MemberGroup]:
        """Get a member group only if it belongs to the workspace"""
        pass
