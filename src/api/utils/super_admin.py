"""
Super-admin authorization

Guards the admin endpoints. The reserve admin bootstrap runs (once per
process) before the check so the reserve account can always sign in.
"""

import logging

from fastapi import Depends, status

from src.api.error import ClientError
from src.app.services.identity_provider import IIdentityProviderAdmin
from src.app.services.reserve_admin import ReserveAdminBootstrap
from src.app.services.super_admin_registry import SuperAdminRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.depends import (
    CurrentUser,
    get_current_user,
    get_identity_provider,
    get_reserve_admin_bootstrap,
    get_unit_of_work,
)
from src.libs.result import Error

logger = logging.getLogger(__name__)


async def require_super_admin(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    idp: IIdentityProviderAdmin = Depends(get_identity_provider),
    bootstrap: ReserveAdminBootstrap = Depends(get_reserve_admin_bootstrap),
) -> CurrentUser:
    """
    Verify the caller is a super admin.

    The realm role decides for linked users and the registry follows it.

    Raises:
        ClientError: 403 if the caller is not a super admin
    """
    bootstrapped = await bootstrap.ensure_reserve_admin()
    if bootstrapped.is_err():
        logger.warning(f"Reserve admin bootstrap failed: {bootstrapped.error.message}")

    async with uow:
        is_super_admin = await SuperAdminRegistry(uow, idp).is_super_admin(current_user.user_id)

    if not is_super_admin:
        raise ClientError(Error("FORBIDDEN", "Forbidden"), status_code=status.HTTP_403_FORBIDDEN)
    return current_user
