"""
Admin API Routes

Super-admin identity operations: reserve admin bootstrap, user listing,
creation, editing and deletion, realm role synchronization.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field

from src.api.error import raise_for_error
from src.api.utils.super_admin import require_super_admin
from src.app.services.identity_provider import IIdentityProviderAdmin
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.reserve_admin import ReserveAdminBootstrap
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import IUserDirectory
from src.app.use_cases.admin import (
    AdminActionResponse,
    BootstrapSyncResponse,
    CreateUserResponse,
    CreateUserUseCase,
    DeleteUserUseCase,
    ListSuperAdminsResponse,
    ListSuperAdminsUseCase,
    ListUsersResponse,
    ListUsersUseCase,
    SyncAllUsersUseCase,
    SyncReserveAdminUseCase,
    SyncSummary,
    SyncUserRolesResponse,
    SyncUserRolesUseCase,
    UpdateUserUseCase,
)
from src.app.use_cases.invites.dtos import CamelModel
from src.depends import (
    CurrentUser,
    get_config,
    get_current_user,
    get_identity_provider,
    get_identity_resolver,
    get_reserve_admin_bootstrap,
    get_role_synchronizer,
    get_unit_of_work,
    get_user_directory,
)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_super_admin)],
)


class ListUsersRequest(CamelModel):
    search: Optional[str] = Field(None, description="Matches email, id, name or workspace")


class CreateUserRequest(CamelModel):
    email: EmailStr = Field(..., description="User email address")
    display_name: Optional[str] = Field(None, max_length=255)


class UpdateUserRequest(CamelModel):
    user_id: UUID = Field(..., description="Internal user id")
    email: Optional[EmailStr] = Field(None, description="New email address")
    display_name: Optional[str] = Field(None, max_length=255)


class DeleteUserRequest(CamelModel):
    user_id: UUID = Field(..., description="Internal user id")


class SyncRolesRequest(CamelModel):
    user_id: UUID = Field(..., description="Internal user id")


@router.post(
    "/bootstrap/sync",
    status_code=status.HTTP_200_OK,
    response_model=BootstrapSyncResponse,
)
async def bootstrap_sync(
    bootstrap: ReserveAdminBootstrap = Depends(get_reserve_admin_bootstrap),
):
    """
    Re-run the reserve super admin bootstrap

    Raises:
        - 503 Service Unavailable: Directory or realm could not be reached
    """
    use_case = SyncReserveAdminUseCase(bootstrap)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/users/list", status_code=status.HTTP_200_OK, response_model=ListUsersResponse)
async def list_users(
    request: Optional[ListUsersRequest] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
    directory: IUserDirectory = Depends(get_user_directory),
    config=Depends(get_config),
):
    """Directory users, without the reserve admin and super admins"""
    use_case = ListUsersUseCase(uow, directory, config.RESERVE_ADMIN_EMAIL)
    result = await use_case.execute(search=request.search if request else None)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/users/create",
    status_code=status.HTTP_200_OK,
    response_model=CreateUserResponse,
    response_model_exclude_none=True,
)
async def create_user(
    request: CreateUserRequest,
    resolver: IdentityResolver = Depends(get_identity_resolver),
    synchronizer: RealmRoleSynchronizer = Depends(get_role_synchronizer),
):
    """Create (or link) a user in both identity stores and sync realm roles"""
    use_case = CreateUserUseCase(resolver, synchronizer)
    result = await use_case.execute(request.email, request.display_name)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/roles/sync", status_code=status.HTTP_200_OK, response_model=SyncUserRolesResponse)
async def sync_user_roles(
    request: SyncRolesRequest,
    resolver: IdentityResolver = Depends(get_identity_resolver),
    synchronizer: RealmRoleSynchronizer = Depends(get_role_synchronizer),
):
    """Recompute one user's managed realm roles"""
    use_case = SyncUserRolesUseCase(resolver, synchronizer)
    result = await use_case.execute(request.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/keycloak/sync", status_code=status.HTTP_200_OK, response_model=SyncSummary)
async def sync_all_users(
    resolver: IdentityResolver = Depends(get_identity_resolver),
    synchronizer: RealmRoleSynchronizer = Depends(get_role_synchronizer),
):
    """Link every directory user to the realm and push their realm roles"""
    use_case = SyncAllUsersUseCase(resolver, synchronizer)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/users/update",
    status_code=status.HTTP_200_OK,
    response_model=AdminActionResponse,
    response_model_exclude_none=True,
)
async def update_user(
    request: UpdateUserRequest,
    resolver: IdentityResolver = Depends(get_identity_resolver),
    synchronizer: RealmRoleSynchronizer = Depends(get_role_synchronizer),
):
    """
    Change a user's email or display name

    The user is relinked to the realm by the resulting email and their
    realm roles are synced again.

    Raises:
        - 404 Not Found: Unknown user
        - 409 Conflict: Email belongs to another user
    """
    use_case = UpdateUserUseCase(resolver, synchronizer)
    result = await use_case.execute(request.user_id, request.email, request.display_name)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/users/delete",
    status_code=status.HTTP_200_OK,
    response_model=AdminActionResponse,
    response_model_exclude_none=True,
)
async def delete_user(
    request: DeleteUserRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    idp: IIdentityProviderAdmin = Depends(get_identity_provider),
    directory: IUserDirectory = Depends(get_user_directory),
    config=Depends(get_config),
):
    """
    Delete a user from the directory and the realm

    Raises:
        - 400 Bad Request: Own account, a super admin or the reserve admin
        - 404 Not Found: Unknown user
    """
    use_case = DeleteUserUseCase(uow, idp, directory, config.RESERVE_ADMIN_EMAIL)
    result = await use_case.execute(request.user_id, current_user.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/superAdmins/list", status_code=status.HTTP_200_OK, response_model=ListSuperAdminsResponse
)
async def list_super_admins(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Registered super admins"""
    use_case = ListSuperAdminsUseCase(uow)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value
