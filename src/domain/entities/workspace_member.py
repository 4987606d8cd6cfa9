"""
WorkspaceMember Entity

Links a profile to a workspace with a role.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.clock import utcnow

from .enums import WorkspaceRole


class WorkspaceMember(SQLModel, table=True):
    """
    WorkspaceMember entity - links a user to a workspace with a role.

    Business Rules:
    - One user can be member of multiple workspaces
    - (workspace_id, user_id) must be unique; writes are upserts
    - The reserve admin is never a member of any workspace
    """

    __tablename__ = "workspace_members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
    user_id: UUID = Field(nullable=False, index=True)

    role: WorkspaceRole = Field(default=WorkspaceRole.viewer, nullable=False)
    group_id: Optional[UUID] = Field(default=None, foreign_key="member_groups.id")

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_workspace_member_workspace_user", "workspace_id", "user_id", unique=True),
    )
