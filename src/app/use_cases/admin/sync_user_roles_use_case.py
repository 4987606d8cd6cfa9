"""
Sync User Roles Use Case
"""

from uuid import UUID

from src.app.services.identity_resolver import IdentityResolver
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.libs.result import Result, Return

from .dtos import SyncUserRolesResponse


class SyncUserRolesUseCase:
    """Recompute one user's realm roles from memberships and push the diff"""

    def __init__(self, identity_resolver: IdentityResolver, synchronizer: RealmRoleSynchronizer):
        self.identity_resolver = identity_resolver
        self.synchronizer = synchronizer

    async def execute(self, user_id: UUID) -> Result[SyncUserRolesResponse]:
        uow = self.identity_resolver.uow
        async with uow:
            synced = await self.synchronizer.sync_user(
                uow, user_id, resolver=self.identity_resolver
            )
            if synced.is_err():
                return Return.err(synced.error)

        return Return.ok(
            SyncUserRolesResponse(
                user_id=str(user_id),
                added=synced.value.added,
                removed=synced.value.removed,
            )
        )
