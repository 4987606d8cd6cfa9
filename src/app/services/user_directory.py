from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID


@dataclass
class DirectoryUser:
    """User record in the primary directory"""

    id: UUID
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
    app_metadata: Dict[str, Any] = field(default_factory=dict)


class IUserDirectory(ABC):
    """
    Admin API of the primary user directory.

    Every method raises an UpstreamError subclass on failure.
    """

    @abstractmethod
    async def list_users(self, page: int, per_page: int) -> List[DirectoryUser]:
        """One page of users, 1-based"""
        pass

    @abstractmethod
    async def get_user(self, user_id: UUID) -> Optional[DirectoryUser]:
        pass

    @abstractmethod
    async def create_user(
        self,
        email: str,
        password: str,
        email_confirm: bool = True,
        app_metadata: Optional[Dict[str, Any]] = None,
    ) -> DirectoryUser:
        pass

    @abstractmethod
    async def update_user(
        self,
        user_id: UUID,
        app_metadata: Optional[Dict[str, Any]] = None,
        password: Optional[str] = None,
        email_confirm: Optional[bool] = None,
        email: Optional[str] = None,
    ) -> DirectoryUser:
        pass

    @abstractmethod
    async def delete_user(self, user_id: UUID) -> None:
        pass
