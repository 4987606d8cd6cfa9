"""
Workspace Access Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    InviteRevokedReason,
    InviteStatus,
    RealmRole,
    WorkspaceRole,
)

# Export invite state
from .invite_state import (
    Accepted,
    InviteState,
    InviteTransitionError,
    Pending,
    Revoked,
)

# Export all entities
from .workspace import Workspace
from .member_group import MemberGroup
from .workspace_member import WorkspaceMember
from .profile import Profile
from .super_admin import SuperAdmin
from .identity_link import IdentityLink
from .invite import WorkspaceInvite, normalize_email
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "InviteRevokedReason",
    "InviteStatus",
    "RealmRole",
    "WorkspaceRole",
    # Invite state
    "Accepted",
    "InviteState",
    "InviteTransitionError",
    "Pending",
    "Revoked",
    # Entities
    "Workspace",
    "MemberGroup",
    "WorkspaceMember",
    "Profile",
    "SuperAdmin",
    "IdentityLink",
    "WorkspaceInvite",
    "AuditEvent",
    "normalize_email",
]
