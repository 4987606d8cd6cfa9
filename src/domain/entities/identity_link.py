"""
IdentityLink Entity

The only record asserting that a primary-directory user and an
external-realm user are the same person.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.clock import utcnow


class IdentityLink(SQLModel, table=True):
    """
    IdentityLink entity.

    Business Rules:
    - One link per internal user, one internal user per external id
    - Created on first resolution, refreshed on every later one, never deleted
    """

    __tablename__ = "identity_links"

    user_id: UUID = Field(primary_key=True)
    external_user_id: str = Field(max_length=255, unique=True, index=True)

    email: str = Field(max_length=255, nullable=False)
    display_name: Optional[str] = Field(default=None, max_length=255)
    issuer: Optional[str] = Field(default=None, max_length=512)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
