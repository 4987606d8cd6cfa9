"""
Workspace Access Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class WorkspaceRole(str, Enum):
    """Role of a member within a workspace"""

    viewer = "viewer"
    editor = "editor"
    admin = "admin"


class InviteRevokedReason(str, Enum):
    """Why a pending invite was revoked"""

    expired = "expired"
    declined = "declined"
    canceled = "canceled"


class InviteStatus(str, Enum):
    """Display status derived from the invite's terminal fields"""

    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    canceled = "canceled"
    expired = "expired"


class RealmRole(str, Enum):
    """Realm roles managed in the external identity realm"""

    super_admin = "app_super_admin"
    workspace_admin = "app_workspace_admin"
    workspace_editor = "app_workspace_editor"
    workspace_viewer = "app_workspace_viewer"
