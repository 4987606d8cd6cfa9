"""
SuperAdmin Entity

Registry of internal users with platform-wide admin rights.
"""

from datetime import datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.clock import utcnow


class SuperAdmin(SQLModel, table=True):
    __tablename__ = "super_admins"

    user_id: UUID = Field(primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
