from typing import List
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.super_admin_repository import ISuperAdminRepository
from src.domain.entities import SuperAdmin


class SuperAdminRepository(ISuperAdminRepository):
    """Super-admin registry implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def is_super_admin(self, user_id: UUID) -> bool:
        stmt = select(SuperAdmin).where(SuperAdmin.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none() is not None

    async def list_user_ids(self) -> List[UUID]:
        result = await self.session.exec(select(SuperAdmin))
        return [row.user_id for row in result.all()]

    async def list_all(self) -> List[SuperAdmin]:
        result = await self.session.exec(select(SuperAdmin).order_by(SuperAdmin.created_at))
        return list(result.all())

    async def add(self, user_id: UUID) -> None:
        if await self.is_super_admin(user_id):
            return
        self.session.add(SuperAdmin(user_id=user_id))
        await self.session.flush()

    async def remove(self, user_id: UUID) -> None:
        await self.session.execute(delete(SuperAdmin).where(SuperAdmin.user_id == user_id))
