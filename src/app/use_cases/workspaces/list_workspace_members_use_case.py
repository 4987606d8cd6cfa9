"""
List Workspace Members Use Case

Members (and therefore task assignee candidates) of one workspace.
"""

from typing import Optional
from uuid import UUID

from src.app.services.reserve_admin import ReserveAdminFilter
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

from .dtos import ListWorkspaceMembersResponse, WorkspaceMemberInfo


class ListWorkspaceMembersUseCase:
    """
    Use case for listing workspace members.

    Business Rules:
    - Caller must be a member of the workspace
    - The reserve admin never appears, even if a stale membership exists
    """

    def __init__(self, uow: UnitOfWork, reserve_admin_email: Optional[str]):
        self.uow = uow
        self.reserve_admin_email = reserve_admin_email

    async def execute(
        self, user_id: UUID, workspace_id: UUID
    ) -> Result[ListWorkspaceMembersResponse]:
        async with self.uow:
            workspace = await self.uow.workspaces.get_by_id(workspace_id)
            if workspace is None:
                return Return.err(Error("WORKSPACE_NOT_FOUND", "Workspace not found."))

            caller = await self.uow.memberships.get_by_user_and_workspace(user_id, workspace_id)
            if caller is None:
                return Return.err(Error("FORBIDDEN", "Forbidden"))

            memberships = await self.uow.memberships.get_by_workspace_id(workspace_id)
            profiles = await self.uow.profiles.get_many([m.user_id for m in memberships])

            members = []
            for membership in memberships:
                profile = profiles.get(membership.user_id)
                members.append(
                    WorkspaceMemberInfo(
                        user_id=str(membership.user_id),
                        email=profile.email if profile else None,
                        display_name=profile.display_name if profile else None,
                        role=membership.role.value,
                        group_id=str(membership.group_id) if membership.group_id else None,
                        joined_at=membership.created_at,
                    )
                )

        visible = ReserveAdminFilter(self.reserve_admin_email).apply(
            members, email_of=lambda member: member.email
        )
        return Return.ok(
            ListWorkspaceMembersResponse(workspace_id=str(workspace_id), members=visible)
        )
