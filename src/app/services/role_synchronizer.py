"""
Realm role synchronization.

Desired realm roles are derived from internal state (super-admin registry
and workspace memberships) and pushed to the external realm as a diff that
is restricted to a managed role universe. Roles outside that universe are
never read for the diff and never written.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set
from uuid import UUID

from src.app.services.errors import UpstreamError
from src.app.services.identity_provider import IIdentityProviderAdmin
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RealmRole, WorkspaceRole
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

WORKSPACE_ROLE_TO_REALM_ROLE = {
    WorkspaceRole.viewer: RealmRole.workspace_viewer.value,
    WorkspaceRole.editor: RealmRole.workspace_editor.value,
    WorkspaceRole.admin: RealmRole.workspace_admin.value,
}
SUPER_ADMIN_REALM_ROLE = RealmRole.super_admin.value

MANAGED_REALM_ROLES = (
    RealmRole.super_admin.value,
    RealmRole.workspace_admin.value,
    RealmRole.workspace_editor.value,
    RealmRole.workspace_viewer.value,
)


@dataclass
class RoleSnapshot:
    """Per-request view of a user's internal roles; never cached"""

    is_super_admin: bool = False
    workspace_roles: Set[WorkspaceRole] = field(default_factory=set)


@dataclass
class RoleSyncResult:
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def _unique(names: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(name for name in names if name))


def build_desired_realm_roles(snapshot: Optional[RoleSnapshot]) -> List[str]:
    if snapshot is None:
        return []
    desired = set()
    if snapshot.is_super_admin:
        desired.add(SUPER_ADMIN_REALM_ROLE)
    for role in snapshot.workspace_roles:
        mapped = WORKSPACE_ROLE_TO_REALM_ROLE.get(WorkspaceRole(role))
        if mapped:
            desired.add(mapped)
    return [name for name in MANAGED_REALM_ROLES if name in desired]


async def load_role_snapshot(uow: UnitOfWork, user_id: UUID) -> RoleSnapshot:
    snapshot = RoleSnapshot(is_super_admin=await uow.super_admins.is_super_admin(user_id))
    for membership in await uow.memberships.get_by_user_id(user_id):
        try:
            snapshot.workspace_roles.add(WorkspaceRole(membership.role))
        except ValueError:
            continue
    return snapshot


class RealmRoleSynchronizer:
    """Applies the managed-role diff for one external user"""

    def __init__(self, idp: IIdentityProviderAdmin):
        self.idp = idp

    async def sync_roles(
        self,
        external_user_id: str,
        desired_role_names: Iterable[str],
        managed_role_names: Iterable[str] = MANAGED_REALM_ROLES,
    ) -> Result[RoleSyncResult]:
        """
        Make the user's managed realm roles equal to the desired set.

        Args:
            external_user_id: Realm user ID
            desired_role_names: Roles the user should hold; unmanaged names are dropped
            managed_role_names: The only roles this call may read or write

        Returns:
            Result with RoleSyncResult (added, removed), or Error
        """
        managed = _unique(managed_role_names)
        managed_set = set(managed)
        desired = [name for name in _unique(desired_role_names) if name in managed_set]
        desired_set = set(desired)

        try:
            self.idp.ensure_ready()
            roles_by_name = await self.idp.ensure_realm_roles(managed)

            current = await self.idp.get_user_realm_roles(external_user_id)
            current_managed = _unique(
                role.name for role in current if role.name in managed_set
            )
            current_managed_set = set(current_managed)

            to_add = [name for name in desired if name not in current_managed_set]
            to_remove = [name for name in current_managed if name not in desired_set]

            if to_add:
                await self.idp.add_realm_roles_to_user(
                    external_user_id,
                    [roles_by_name[name] for name in to_add if name in roles_by_name],
                )
            if to_remove:
                await self.idp.remove_realm_roles_from_user(
                    external_user_id,
                    [roles_by_name[name] for name in to_remove if name in roles_by_name],
                )
        except UpstreamError as exc:
            logger.warning(f"Realm role sync failed for {external_user_id}: {exc.message}")
            return Return.err(exc.to_error())

        if to_add or to_remove:
            logger.info(
                f"Realm roles synced for {external_user_id}: +{to_add} -{to_remove}"
            )
        return Return.ok(RoleSyncResult(added=to_add, removed=to_remove))

    async def sync_user(
        self,
        uow: UnitOfWork,
        user_id: UUID,
        external_user_id: Optional[str] = None,
        resolver=None,
    ) -> Result[RoleSyncResult]:
        """
        Recompute and push realm roles for an internal user.

        The external id is taken from the argument, then the identity link,
        then (when a resolver is given) a fresh resolution by email.
        """
        if external_user_id is None:
            link = await uow.identity_links.get_by_user_id(user_id)
            if link is not None:
                external_user_id = link.external_user_id
        if external_user_id is None:
            if resolver is None:
                return Return.err(
                    Error("NOT_FOUND", "User has no linked identity in the realm.")
                )
            resolved = await resolver.resolve_external_user_id(user_id)
            if resolved.is_err():
                return Return.err(resolved.error)
            external_user_id = resolved.value

        snapshot = await load_role_snapshot(uow, user_id)
        return await self.sync_roles(
            external_user_id, build_desired_realm_roles(snapshot), MANAGED_REALM_ROLES
        )
