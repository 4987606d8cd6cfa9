from datetime import datetime
from typing import List, Optional

from src.app.use_cases.invites.dtos import CamelModel


class WorkspaceMemberInfo(CamelModel):
    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: str
    group_id: Optional[str] = None
    joined_at: Optional[datetime] = None


class ListWorkspaceMembersResponse(CamelModel):
    success: bool = True
    workspace_id: str
    members: List[WorkspaceMemberInfo] = []
