"""
Sync Reserve Admin Use Case
"""

from src.app.services.reserve_admin import ReserveAdminBootstrap
from src.libs.result import Result, Return

from .dtos import BootstrapSyncResponse


class SyncReserveAdminUseCase:
    """Re-run the reserve admin bootstrap regardless of the per-process memo"""

    def __init__(self, bootstrap: ReserveAdminBootstrap):
        self.bootstrap = bootstrap

    async def execute(self) -> Result[BootstrapSyncResponse]:
        result = await self.bootstrap.ensure_reserve_admin(force=True)
        if result.is_err():
            return Return.err(result.error)

        status = result.value
        return Return.ok(
            BootstrapSyncResponse(
                reserve_admin_configured=status.configured,
                reserve_admin_user_id=str(status.user_id) if status.user_id else None,
                reserve_admin_realm_linked=status.realm_linked,
            )
        )
