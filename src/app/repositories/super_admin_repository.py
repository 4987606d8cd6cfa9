from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import SuperAdmin


class ISuperAdminRepository(ABC):
    """Super-admin registry interface - application layer"""

    @abstractmethod
    async def is_super_admin(self, user_id: UUID) -> bool:
        """Check registry membership"""
        pass

    @abstractmethod
    async def list_user_ids(self) -> List[UUID]:
        """List every registered super admin"""
        pass

    @abstractmethod
    async def list_all(self) -> List[SuperAdmin]:
        """Registry rows, oldest first"""
        pass

    @abstractmethod
    async def add(self, user_id: UUID) -> None:
        """Register a super admin (idempotent)"""
        pass

    @abstractmethod
    async def remove(self, user_id: UUID) -> None:
        """Unregister a super admin (idempotent)"""
        pass
