"""
Admin Use Case DTOs
"""

from datetime import datetime
from typing import List, Optional

from src.app.use_cases.invites.dtos import CamelModel


class UserWorkspace(CamelModel):
    id: str
    name: str
    role: str


class AdminUser(CamelModel):
    """Directory user as shown to super admins"""

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
    workspace_count: int = 0
    workspaces: List[UserWorkspace] = []


class ListUsersResponse(CamelModel):
    users: List[AdminUser] = []
    total: int = 0


class CreatedUser(CamelModel):
    id: str
    email: str
    display_name: Optional[str] = None


class CreateUserResponse(CamelModel):
    success: bool = True
    user: CreatedUser
    warning: Optional[str] = None
    warnings: List[str] = []


class SyncUserRolesResponse(CamelModel):
    success: bool = True
    user_id: str
    added: List[str] = []
    removed: List[str] = []


class SyncSummary(CamelModel):
    """Outcome of resolving and syncing every directory user"""

    success: bool = True
    processed: int = 0
    created_keycloak_users: int = 0
    created_directory_users: int = 0
    role_assignments_updated: int = 0
    warnings: List[str] = []
    errors: List[str] = []


class BootstrapSyncResponse(CamelModel):
    success: bool = True
    reserve_admin_configured: bool
    reserve_admin_user_id: Optional[str] = None
    reserve_admin_realm_linked: bool = False


class AdminActionResponse(CamelModel):
    """Outcome of a user update or delete"""

    success: bool = True
    user_id: str
    warning: Optional[str] = None
    warnings: List[str] = []


class SuperAdminEntry(CamelModel):
    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None


class ListSuperAdminsResponse(CamelModel):
    super_admins: List[SuperAdminEntry] = []
