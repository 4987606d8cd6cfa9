"""
Invite Use Case DTOs (Data Transfer Objects)

Response classes for the invite lifecycle. Fields are snake_case in
Python and camelCase on the wire.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Response DTOs
# ============================================================================


class CreateInviteResponse(CamelModel):
    """Response for create invite use case"""

    success: bool = True
    action_link: str
    invite_email: str
    invite_status: str
    token: str
    reused: bool = False
    expires_at: datetime
    warning: Optional[str] = None
    warnings: List[str] = []


class ReceivedInvite(CamelModel):
    """Invite addressed to the caller"""

    token: str
    workspace_id: str
    workspace_name: str
    role: str
    inviter_email: Optional[str] = None
    inviter_display_name: Optional[str] = None
    created_at: datetime
    expires_at: datetime


class ListReceivedInvitesResponse(CamelModel):
    success: bool = True
    invites: List[ReceivedInvite] = []


class SentInvite(CamelModel):
    """Invite created by the caller, with derived status"""

    token: str
    workspace_id: str
    workspace_name: str
    email: str
    role: str
    status: str
    is_pending: bool
    created_at: datetime
    responded_at: Optional[datetime] = None
    expires_at: datetime


class ListSentInvitesResponse(CamelModel):
    success: bool = True
    invites: List[SentInvite] = []


class AcceptInviteResponse(CamelModel):
    """Response for accept invite use case"""

    success: bool = True
    workspace_id: str
    role: str
    already_accepted: bool = False
    warning: Optional[str] = None
    warnings: List[str] = []


class InviteActionResponse(CamelModel):
    """Response for decline / cancel"""

    success: bool = True
    status: str
