"""
Delete User Use Case
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.diagnostics import Diagnostics
from src.app.services.errors import UpstreamError
from src.app.services.identity_provider import IIdentityProviderAdmin
from src.app.services.reserve_admin import ReserveAdminFilter
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import AuditEvent
from src.libs.result import Error, Result, Return

from .dtos import AdminActionResponse

logger = logging.getLogger(__name__)


class DeleteUserUseCase:
    """
    Use case for deleting a user as a super admin.

    Business Rules:
    - Nobody deletes their own account, a super admin or the reserve admin
    - The directory user is deleted first; memberships, identity link and
      profile go with it in one commit
    - The linked realm account is deleted last; failure is a warning
    """

    def __init__(
        self,
        uow: UnitOfWork,
        idp: IIdentityProviderAdmin,
        directory: IUserDirectory,
        reserve_admin_email: Optional[str],
    ):
        self.uow = uow
        self.idp = idp
        self.directory = directory
        self.reserve_admin_email = reserve_admin_email

    async def execute(self, user_id: UUID, current_user_id: UUID) -> Result[AdminActionResponse]:
        if user_id == current_user_id:
            return Return.err(Error("INVALID_ARGUMENT", "You cannot delete your own account."))

        async with self.uow:
            if await self.uow.super_admins.is_super_admin(user_id):
                return Return.err(Error("INVALID_ARGUMENT", "Cannot delete a super admin account."))

            try:
                directory_user = await self.directory.get_user(user_id)
            except UpstreamError as exc:
                return Return.err(exc.to_error())
            if directory_user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))
            if ReserveAdminFilter(self.reserve_admin_email).is_hidden(email=directory_user.email):
                return Return.err(Error("INVALID_ARGUMENT", "Cannot delete reserve admin account."))

            link = await self.uow.identity_links.get_by_user_id(user_id)
            external_user_id = link.external_user_id if link else None

            try:
                await self.directory.delete_user(user_id)
            except UpstreamError as exc:
                return Return.err(exc.to_error())

            removed = await self.uow.memberships.delete_by_user_id(user_id)
            await self.uow.identity_links.delete_by_user_id(user_id)
            await self.uow.profiles.delete(user_id)
            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=current_user_id,
                    action="user_deleted",
                    event_metadata={
                        "deleted_user_id": str(user_id),
                        "email": directory_user.email,
                        "removed_memberships": removed,
                    },
                )
            )
            await self.uow.commit()

        diagnostics = Diagnostics()
        if external_user_id:
            try:
                self.idp.ensure_ready()
                await self.idp.delete_user(external_user_id)
            except UpstreamError as exc:
                logger.error(f"Failed to delete realm user {external_user_id}: {exc.message}")
                diagnostics.add(
                    "realm_delete", f"User deleted, but Keycloak user removal failed: {exc.message}"
                )

        return Return.ok(
            AdminActionResponse(
                user_id=str(user_id),
                warning=diagnostics.warning(),
                warnings=diagnostics.messages(),
            )
        )
