"""Admin use cases for super-admin identity operations."""

from .create_user_use_case import CreateUserUseCase
from .delete_user_use_case import DeleteUserUseCase
from .dtos import (
    AdminActionResponse,
    AdminUser,
    BootstrapSyncResponse,
    CreateUserResponse,
    ListSuperAdminsResponse,
    ListUsersResponse,
    SuperAdminEntry,
    SyncSummary,
    SyncUserRolesResponse,
)
from .list_super_admins_use_case import ListSuperAdminsUseCase
from .list_users_use_case import ListUsersUseCase
from .sync_all_users_use_case import SyncAllUsersUseCase
from .sync_reserve_admin_use_case import SyncReserveAdminUseCase
from .sync_user_roles_use_case import SyncUserRolesUseCase
from .update_user_use_case import UpdateUserUseCase

__all__ = [
    "ListUsersUseCase",
    "CreateUserUseCase",
    "UpdateUserUseCase",
    "DeleteUserUseCase",
    "ListSuperAdminsUseCase",
    "SyncUserRolesUseCase",
    "SyncAllUsersUseCase",
    "SyncReserveAdminUseCase",
    "AdminUser",
    "ListUsersResponse",
    "CreateUserResponse",
    "AdminActionResponse",
    "SuperAdminEntry",
    "ListSuperAdminsResponse",
    "SyncUserRolesResponse",
    "SyncSummary",
    "BootstrapSyncResponse",
]
