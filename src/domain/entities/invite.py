"""
WorkspaceInvite Entity

Time-limited invitation of an email address into a workspace.
"""

import secrets
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.clock import as_naive_utc, utcnow

from .enums import InviteRevokedReason, InviteStatus, WorkspaceRole
from .invite_state import Accepted, InviteState, InviteTransitionError, Pending, Revoked

ACTIVE_INVITE_WHERE = "accepted_at IS NULL AND revoked_at IS NULL"


def generate_invite_token() -> str:
    return secrets.token_urlsafe(32)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class WorkspaceInvite(SQLModel, table=True):
    """
    WorkspaceInvite entity.

    Business Rules:
    - Created by an admin of the workspace, expires after INVITE_TTL_DAYS
    - Token is opaque and unguessable; it is both id and capability
    - At most one of accepted_at / revoked_at is ever set, and never cleared
    - At most one active invite per (workspace_id, email_normalized),
      enforced by a partial unique index
    """

    __tablename__ = "workspace_invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    token: str = Field(
        default_factory=generate_invite_token, unique=True, index=True, max_length=64
    )

    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False)
    email_normalized: str = Field(max_length=255, nullable=False, index=True)
    role: WorkspaceRole = Field(default=WorkspaceRole.viewer, nullable=False)
    group_id: Optional[UUID] = Field(default=None, foreign_key="member_groups.id")
    invited_by: UUID = Field(nullable=False, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_reason: Optional[InviteRevokedReason] = Field(default=None)

    __table_args__ = (
        CheckConstraint(
            "accepted_at IS NULL OR revoked_at IS NULL",
            name="ck_workspace_invite_single_terminal",
        ),
        Index(
            "uq_workspace_invite_active",
            "workspace_id",
            "email_normalized",
            unique=True,
            sqlite_where=text(ACTIVE_INVITE_WHERE),
            postgresql_where=text(ACTIVE_INVITE_WHERE),
        ),
        Index("idx_workspace_invite_invited_by_created", "invited_by", "created_at"),
    )

    @property
    def state(self) -> InviteState:
        if self.accepted_at is not None:
            return Accepted(at=self.accepted_at)
        if self.revoked_at is not None:
            return Revoked(
                at=self.revoked_at,
                reason=self.revoked_reason or InviteRevokedReason.canceled,
            )
        return Pending()

    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, Pending)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = as_naive_utc(now or utcnow())
        return as_naive_utc(self.expires_at) <= now

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.is_pending and not self.is_expired(now)

    def mark_accepted(self, at: Optional[datetime] = None) -> None:
        if not self.is_pending:
            raise InviteTransitionError(self.state)
        at = at or utcnow()
        self.accepted_at = at
        self.updated_at = at

    def mark_revoked(self, reason: InviteRevokedReason, at: Optional[datetime] = None) -> None:
        if not self.is_pending:
            raise InviteTransitionError(self.state)
        at = at or utcnow()
        self.revoked_at = at
        self.revoked_reason = reason
        self.updated_at = at

    def display_status(self, now: Optional[datetime] = None) -> InviteStatus:
        state = self.state
        if isinstance(state, Accepted):
            return InviteStatus.accepted
        if isinstance(state, Revoked):
            return InviteStatus(state.reason.value)
        if self.is_expired(now):
            return InviteStatus.expired
        return InviteStatus.pending

    @property
    def responded_at(self) -> Optional[datetime]:
        return self.accepted_at or self.revoked_at
