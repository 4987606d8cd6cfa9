"""
AuditEvent Entity

Immutable log of invite lifecycle and admin events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.clock import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of invite and identity events.

    Business Rules:
    - Immutable (never updated or deleted)
    - workspace_id nullable for global events (reserve admin sync, role sync)
    - Metadata stores additional context (invite token id, role, email)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    workspace_id: Optional[UUID] = Field(default=None, index=True)
    user_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "invite_sent", "invite_accepted"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_workspace_action", "workspace_id", "action"),
    )
