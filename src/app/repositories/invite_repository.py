from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import WorkspaceInvite


class InviteConflictError(Exception):
    """Insert lost the race on the active (workspace, email) uniqueness"""


class IInviteRepository(ABC):
    """Workspace invite repository interface - application layer"""

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[WorkspaceInvite]:
        """Get invite by token"""
        pass

    @abstractmethod
    async def get_pending_by_workspace_and_email(
        self, workspace_id: UUID, email_normalized: str
    ) -> List[WorkspaceInvite]:
        """Get non-terminal invites for a workspace and email, newest first"""
        pass

    @abstractmethod
    async def get_pending_by_email(self, email_normalized: str) -> List[WorkspaceInvite]:
        """Get non-terminal invites addressed to an email, newest first"""
        pass

    @abstractmethod
    async def get_sent_since(
        self, invited_by: UUID, since: datetime
    ) -> List[WorkspaceInvite]:
        """Get invites created by a user since a point in time, newest first"""
        pass

    @abstractmethod
    async def create(self, invite: WorkspaceInvite) -> WorkspaceInvite:
        """Insert a new invite; raises InviteConflictError on active duplicate"""
        pass

    @abstractmethod
    async def update(self, invite: WorkspaceInvite) -> WorkspaceInvite:
        """Update existing invite"""
        pass
