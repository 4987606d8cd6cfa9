"""
Profile Entity

Mirror of a primary-directory user, keyed by the directory user id.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.clock import utcnow


class Profile(SQLModel, table=True):
    """Profile - display data for an internal user id"""

    __tablename__ = "profiles"

    id: UUID = Field(primary_key=True)
    email: Optional[str] = Field(default=None, max_length=255, index=True)
    display_name: Optional[str] = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
