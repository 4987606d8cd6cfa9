"""
MemberGroup Entity

Named group of members inside one workspace.
"""

from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class MemberGroup(SQLModel, table=True):
    """Member group - always scoped to exactly one workspace"""

    __tablename__ = "member_groups"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)
