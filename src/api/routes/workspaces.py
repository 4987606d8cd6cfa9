from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invites.dtos import CamelModel
from src.app.use_cases.workspaces import (
    ListWorkspaceMembersResponse,
    ListWorkspaceMembersUseCase,
)
from src.depends import CurrentUser, get_config, get_current_user, get_unit_of_work

router = APIRouter(prefix="/workspaces", tags=["Workspaces"])


class ListMembersRequest(CamelModel):
    workspace_id: UUID = Field(..., description="Workspace to list")


@router.post(
    "/members/list",
    status_code=status.HTTP_200_OK,
    response_model=ListWorkspaceMembersResponse,
)
async def list_workspace_members(
    request: ListMembersRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """
    List Workspace Members

    Members and assignee candidates of a workspace; the reserve admin is
    never listed.

    Raises:
        - 403 Forbidden: Caller is not a member of the workspace
        - 404 Not Found: WORKSPACE_NOT_FOUND
    """
    use_case = ListWorkspaceMembersUseCase(uow, config.RESERVE_ADMIN_EMAIL)
    result = await use_case.execute(current_user.user_id, request.workspace_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
