"""
Workspace Entity

A tenant of the planner. Members, groups and invites hang off it.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.clock import utcnow


class Workspace(SQLModel, table=True):
    """
    Workspace entity.

    Business Rules:
    - owner_id is the profile that created the workspace
    - Only members with role=admin may invite others
    """

    __tablename__ = "workspaces"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    owner_id: UUID = Field(nullable=False, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
