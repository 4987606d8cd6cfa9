from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import Profile


class IProfileRepository(ABC):
    """Profile repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[Profile]:
        """Get profile by user ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email_normalized: str) -> Optional[Profile]:
        """Get profile by normalized email"""
        pass

    @abstractmethod
    async def get_many(self, user_ids: List[UUID]) -> Dict[UUID, Profile]:
        """Map user IDs to profiles"""
        pass

    @abstractmethod
    async def upsert(
        self, user_id: UUID, email: str, display_name: Optional[str] = None
    ) -> Profile:
        """Create or refresh a profile; display_name only overwritten when given"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Remove the profile of a deleted user"""
        pass
