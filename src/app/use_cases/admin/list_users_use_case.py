"""
List Users Use Case

Directory users for the admin console, without hidden accounts.
"""

from typing import Dict, List, Optional
from uuid import UUID

from src.app.services.errors import UpstreamError
from src.app.services.identity_resolver import list_all_directory_users
from src.app.services.reserve_admin import ReserveAdminFilter
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import IUserDirectory
from src.libs.result import Result, Return

from .dtos import AdminUser, ListUsersResponse, UserWorkspace


class ListUsersUseCase:
    """
    Use case for listing directory users.

    Business Rules:
    - The reserve admin and every registered super admin are hidden
    - search matches email, user id, display name or any workspace name,
      case-insensitively
    """

    def __init__(
        self,
        uow: UnitOfWork,
        directory: IUserDirectory,
        reserve_admin_email: Optional[str],
    ):
        self.uow = uow
        self.directory = directory
        self.reserve_admin_email = reserve_admin_email

    async def execute(self, search: Optional[str] = None) -> Result[ListUsersResponse]:
        try:
            directory_users = await list_all_directory_users(self.directory)
        except UpstreamError as exc:
            return Return.err(exc.to_error())

        async with self.uow:
            hidden = ReserveAdminFilter(
                self.reserve_admin_email, await self.uow.super_admins.list_user_ids()
            )
            visible = hidden.apply(
                directory_users, email_of=lambda user: user.email, user_id_of=lambda user: user.id
            )
            user_ids = [user.id for user in visible]
            if not user_ids:
                return Return.ok(ListUsersResponse(users=[], total=0))

            profiles = await self.uow.profiles.get_many(user_ids)
            memberships = await self.uow.memberships.get_by_user_ids(user_ids)
            workspace_names = await self.uow.workspaces.get_names(
                [membership.workspace_id for membership in memberships]
            )

            workspaces_by_user: Dict[UUID, List[UserWorkspace]] = {}
            for membership in memberships:
                workspaces_by_user.setdefault(membership.user_id, []).append(
                    UserWorkspace(
                        id=str(membership.workspace_id),
                        name=workspace_names.get(membership.workspace_id, "Workspace"),
                        role=membership.role.value,
                    )
                )

            users = []
            for user in visible:
                profile = profiles.get(user.id)
                workspaces = workspaces_by_user.get(user.id, [])
                users.append(
                    AdminUser(
                        id=str(user.id),
                        email=user.email or (profile.email if profile else None),
                        display_name=profile.display_name if profile else None,
                        created_at=user.created_at,
                        last_sign_in_at=user.last_sign_in_at,
                        workspace_count=len(workspaces),
                        workspaces=workspaces,
                    )
                )

        term = (search or "").strip().lower()
        if term:
            users = [user for user in users if _matches(user, term)]

        return Return.ok(ListUsersResponse(users=users, total=len(users)))


def _matches(user: AdminUser, term: str) -> bool:
    return (
        term in (user.email or "").lower()
        or term in user.id.lower()
        or term in (user.display_name or "").lower()
        or any(term in workspace.name.lower() for workspace in user.workspaces)
    )
