"""
List Super Admins Use Case
"""

from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return

from .dtos import ListSuperAdminsResponse, SuperAdminEntry


class ListSuperAdminsUseCase:
    """Registered super admins with their profile email and name"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[ListSuperAdminsResponse]:
        async with self.uow:
            rows = await self.uow.super_admins.list_all()
            profiles = await self.uow.profiles.get_many([row.user_id for row in rows])

        entries = []
        for row in rows:
            profile = profiles.get(row.user_id)
            entries.append(
                SuperAdminEntry(
                    user_id=str(row.user_id),
                    email=profile.email if profile else None,
                    display_name=profile.display_name if profile else None,
                    created_at=row.created_at,
                )
            )
        return Return.ok(ListSuperAdminsResponse(super_admins=entries))
