from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.profile_repository import IProfileRepository
from src.domain.entities import Profile


class ProfileRepository(IProfileRepository):
    """Profile repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[Profile]:
        """Get profile by user ID"""
        stmt = select(Profile).where(Profile.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email_normalized: str) -> Optional[Profile]:
        """Get profile by normalized email"""
        stmt = select(Profile).where(Profile.email == email_normalized)
        result = await self.session.exec(stmt)
        return result.first()

    async def get_many(self, user_ids: List[UUID]) -> Dict[UUID, Profile]:
        """Map user IDs to profiles"""
        unique_ids = list(set(user_ids))
        if not unique_ids:
            return {}
        stmt = select(Profile).where(Profile.id.in_(unique_ids))
        result = await self.session.exec(stmt)
        return {profile.id: profile for profile in result.all()}

    async def upsert(
        self, user_id: UUID, email: str, display_name: Optional[str] = None
    ) -> Profile:
        """Create or refresh a profile; display_name only overwritten when given"""
        profile = await self.get_by_id(user_id)
        if profile is None:
            profile = Profile(id=user_id, email=email, display_name=display_name)
        else:
            profile.email = email
            if display_name is not None:
                profile.display_name = display_name
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def delete(self, user_id: UUID) -> None:
        """Remove the profile of a deleted user"""
        await self.session.execute(delete(Profile).where(Profile.id == user_id))
