from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import IdentityLink


class IdentityLinkConflictError(Exception):
    """External user id is already linked to a different internal user"""

    def __init__(self, external_user_id: str, linked_user_id: UUID):
        self.external_user_id = external_user_id
        self.linked_user_id = linked_user_id
        super().__init__(
            f"External identity {external_user_id} is already linked to user {linked_user_id}"
        )


class IIdentityLinkRepository(ABC):
    """Identity link repository interface - application layer"""

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[IdentityLink]:
        """Get link by internal user ID"""
        pass

    @abstractmethod
    async def get_by_external_id(self, external_user_id: str) -> Optional[IdentityLink]:
        """Get link by external realm user ID"""
        pass

    @abstractmethod
    async def upsert(
        self,
        user_id: UUID,
        external_user_id: str,
        email: str,
        display_name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> IdentityLink:
        """Create or refresh the link; raises IdentityLinkConflictError on relink"""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> None:
        """Drop the link of a deleted user"""
        pass
