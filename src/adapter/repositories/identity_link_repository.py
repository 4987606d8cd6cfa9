from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.identity_link_repository import (
    IdentityLinkConflictError,
    IIdentityLinkRepository,
)
from src.domain.clock import utcnow
from src.domain.entities import IdentityLink


class IdentityLinkRepository(IIdentityLinkRepository):
    """Identity link repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: UUID) -> Optional[IdentityLink]:
        """Get link by internal user ID"""
        stmt = select(IdentityLink).where(IdentityLink.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_external_id(self, external_user_id: str) -> Optional[IdentityLink]:
        """Get link by external realm user ID"""
        stmt = select(IdentityLink).where(IdentityLink.external_user_id == external_user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def upsert(
        self,
        user_id: UUID,
        external_user_id: str,
        email: str,
        display_name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> IdentityLink:
        """Create or refresh the link; raises IdentityLinkConflictError on relink"""
        claimed = await self.get_by_external_id(external_user_id)
        if claimed is not None and claimed.user_id != user_id:
            raise IdentityLinkConflictError(external_user_id, claimed.user_id)

        link = await self.get_by_user_id(user_id)
        if link is None:
            link = IdentityLink(
                user_id=user_id,
                external_user_id=external_user_id,
                email=email,
                display_name=display_name,
                issuer=issuer,
            )
        else:
            link.external_user_id = external_user_id
            link.email = email
            if display_name is not None:
                link.display_name = display_name
            if issuer is not None:
                link.issuer = issuer
            link.updated_at = utcnow()
        self.session.add(link)
        await self.session.flush()
        await self.session.refresh(link)
        return link

    async def delete_by_user_id(self, user_id: UUID) -> None:
        """Drop the link of a deleted user"""
        stmt = delete(IdentityLink).where(IdentityLink.user_id == user_id)
        await self.session.execute(stmt)
