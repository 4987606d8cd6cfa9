"""
Use Cases

Organized into domain folders:
- invites/: Workspace invite lifecycle
- admin/: Super-admin identity operations
- workspaces/: Workspace membership views

Import from subdirectories for better organization.
"""

from .admin import (
    CreateUserUseCase,
    DeleteUserUseCase,
    ListSuperAdminsUseCase,
    ListUsersUseCase,
    SyncAllUsersUseCase,
    SyncReserveAdminUseCase,
    SyncUserRolesUseCase,
    UpdateUserUseCase,
)
from .invites import (
    AcceptInviteUseCase,
    CancelInviteUseCase,
    CreateInviteUseCase,
    DeclineInviteUseCase,
    ListReceivedInvitesUseCase,
    ListSentInvitesUseCase,
)
from .workspaces import ListWorkspaceMembersUseCase

__all__ = [
    # Invites
    "CreateInviteUseCase",
    "ListReceivedInvitesUseCase",
    "ListSentInvitesUseCase",
    "AcceptInviteUseCase",
    "DeclineInviteUseCase",
    "CancelInviteUseCase",
    # Admin
    "ListUsersUseCase",
    "CreateUserUseCase",
    "UpdateUserUseCase",
    "DeleteUserUseCase",
    "ListSuperAdminsUseCase",
    "SyncUserRolesUseCase",
    "SyncAllUsersUseCase",
    "SyncReserveAdminUseCase",
    # Workspaces
    "ListWorkspaceMembersUseCase",
]
