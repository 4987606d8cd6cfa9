"""
Super-admin registry kept in step with the realm.

The realm role ``app_super_admin`` is authoritative for linked users: the
local ``super_admins`` row is added or dropped to match it. Users without a
link, or a realm that cannot be asked, fall back to the local row.
"""

import logging
from uuid import UUID

from src.app.services.errors import UpstreamError
from src.app.services.identity_provider import IIdentityProviderAdmin
from src.app.services.role_synchronizer import SUPER_ADMIN_REALM_ROLE
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SuperAdminRegistry:
    def __init__(self, uow: UnitOfWork, idp: IIdentityProviderAdmin):
        self.uow = uow
        self.idp = idp

    async def is_super_admin(self, user_id: UUID) -> bool:
        """Reconcile the registry row with the realm role, then answer from it"""
        in_registry = await self.uow.super_admins.is_super_admin(user_id)

        link = await self.uow.identity_links.get_by_user_id(user_id)
        if link is None:
            return in_registry

        try:
            self.idp.ensure_ready()
            realm_roles = await self.idp.get_user_realm_roles(link.external_user_id)
        except UpstreamError as exc:
            logger.warning(f"Super-admin check fell back to registry for {user_id}: {exc.message}")
            return in_registry

        has_realm_role = any(role.name == SUPER_ADMIN_REALM_ROLE for role in realm_roles)
        if has_realm_role and not in_registry:
            await self.uow.super_admins.add(user_id)
            await self.uow.commit()
            logger.info(f"Registered super admin {user_id} from realm role")
        elif in_registry and not has_realm_role:
            await self.uow.super_admins.remove(user_id)
            await self.uow.commit()
            logger.info(f"Unregistered super admin {user_id}; realm role is gone")
        return has_realm_role
