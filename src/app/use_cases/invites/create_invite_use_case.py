"""
Create Invite Use Case

Issues (or reuses) the single active invite of an email into a workspace.
"""

import html
import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from src.app.repositories.invite_repository import InviteConflictError
from src.app.services.diagnostics import Diagnostics
from src.app.services.email_sender import IEmailSender
from src.app.services.errors import UpstreamError
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.entities import (
    AuditEvent,
    InviteRevokedReason,
    InviteStatus,
    WorkspaceInvite,
    WorkspaceRole,
    normalize_email,
)
from src.libs.result import Error, Result, Return

from .dtos import CreateInviteResponse

logger = logging.getLogger(__name__)

DEFAULT_INVITE_TTL_DAYS = 14


class CreateInviteUseCase:
    """
    Use case for inviting an email address into a workspace.

    Business Rules:
    - Only admins of the workspace can invite
    - group_id, when given, must belong to the workspace
    - Expired pending invites for the same (workspace, email) are revoked first
    - An unexpired pending invite is reused (role/group/expiry refreshed)
      instead of issuing a second token
    - A concurrent insert that loses on the store's uniqueness constraint
      re-reads the winning row and updates it
    - Invitee provisioning and emails are best effort; failures become warnings
    """

    def __init__(
        self,
        uow: UnitOfWork,
        identity_resolver: IdentityResolver,
        email_sender: IEmailSender,
        app_url: str,
        invite_ttl_days: int = DEFAULT_INVITE_TTL_DAYS,
    ):
        self.uow = uow
        self.identity_resolver = identity_resolver
        self.email_sender = email_sender
        self.app_url = app_url.rstrip("/")
        self.invite_ttl_days = invite_ttl_days

    async def execute(
        self,
        inviter_user_id: UUID,
        workspace_id: UUID,
        email: str,
        role: Optional[str] = None,
        group_id: Optional[UUID] = None,
    ) -> Result[CreateInviteResponse]:
        """
        Execute create invite use case.

        Args:
            inviter_user_id: Caller, must be admin of the workspace
            workspace_id: Target workspace
            email: Invitee email (normalized here)
            role: viewer/editor/admin, defaults to viewer
            group_id: Optional member group inside the workspace

        Returns:
            Result with CreateInviteResponse DTO, or Error
        """
        email_normalized = normalize_email(email)
        if not email_normalized:
            return Return.err(
                Error("INVALID_ARGUMENT", "workspaceId and email are required")
            )

        try:
            invite_role = WorkspaceRole(role or WorkspaceRole.viewer.value)
        except ValueError:
            return Return.err(Error("INVALID_ROLE", "Invalid role"))

        async with self.uow:
            workspace = await self.uow.workspaces.get_by_id(workspace_id)
            if workspace is None:
                return Return.err(Error("WORKSPACE_NOT_FOUND", "Workspace not found."))
            workspace_name = workspace.name

            inviter_membership = await self.uow.memberships.get_by_user_and_workspace(
                inviter_user_id, workspace_id
            )
            if inviter_membership is None or inviter_membership.role != WorkspaceRole.admin:
                return Return.err(Error("FORBIDDEN", "Forbidden"))

            if group_id is not None:
                group = await self.uow.workspaces.get_group(workspace_id, group_id)
                if group is None:
                    return Return.err(Error("GROUP_NOT_FOUND", "Group not found."))

            invitee_profile = await self.uow.profiles.get_by_email(email_normalized)
            if invitee_profile is not None:
                existing = await self.uow.memberships.get_by_user_and_workspace(
                    invitee_profile.id, workspace_id
                )
                if existing is not None:
                    return Return.err(
                        Error("ALREADY_MEMBER", "User is already a member of this workspace.")
                    )

            now = utcnow()
            expires_at = now + timedelta(days=self.invite_ttl_days)

            invite = await self._reusable_invite(workspace_id, email_normalized, now)
            reused = invite is not None
            if invite is not None:
                self._refresh(invite, inviter_user_id, email, invite_role, group_id, expires_at, now)
                await self.uow.invites.update(invite)
            else:
                invite = WorkspaceInvite(
                    workspace_id=workspace_id,
                    email=email.strip(),
                    email_normalized=email_normalized,
                    role=invite_role,
                    group_id=group_id,
                    invited_by=inviter_user_id,
                    created_at=now,
                    updated_at=now,
                    expires_at=expires_at,
                )
                try:
                    invite = await self.uow.invites.create(invite)
                except InviteConflictError:
                    invite = await self._race_winner(workspace_id, email_normalized)
                    if invite is None:
                        return Return.err(
                            Error("CONFLICT", "Invite could not be created, please retry.")
                        )
                    logger.info(
                        f"Invite insert lost the race for workspace {workspace_id}; "
                        f"updating invite {invite.id}"
                    )
                    self._refresh(
                        invite, inviter_user_id, email, invite_role, group_id, expires_at, now
                    )
                    await self.uow.invites.update(invite)
                    reused = True

            await self.uow.audit_events.create(
                AuditEvent(
                    workspace_id=workspace_id,
                    user_id=inviter_user_id,
                    action="invite_reused" if reused else "invite_sent",
                    event_metadata={
                        "invite_id": str(invite.id),
                        "invited_email": email_normalized,
                        "role": invite_role.value,
                    },
                )
            )
            await self.uow.commit()

            # Side effects may roll the session back; read the row first.
            token = invite.token
            expires_at = invite.expires_at
            action_link = f"{self.app_url}/invite/{token}"

            diagnostics = Diagnostics()
            await self._provision_invitee(email_normalized, diagnostics)
            await self._send_invite_email(email_normalized, workspace_name, action_link, diagnostics)

            return Return.ok(
                CreateInviteResponse(
                    success=True,
                    action_link=action_link,
                    invite_email=email_normalized,
                    invite_status=InviteStatus.pending.value,
                    token=token,
                    reused=reused,
                    expires_at=expires_at,
                    warning=diagnostics.warning(),
                    warnings=diagnostics.messages(),
                )
            )

    async def _reusable_invite(
        self, workspace_id: UUID, email_normalized: str, now: datetime
    ) -> Optional[WorkspaceInvite]:
        """Revoke stale pending duplicates and return the live one, if any"""
        pending: List[WorkspaceInvite] = await self.uow.invites.get_pending_by_workspace_and_email(
            workspace_id, email_normalized
        )
        live = None
        revoked_any = False
        for invite in pending:
            if invite.is_expired(now):
                invite.mark_revoked(InviteRevokedReason.expired, now)
                await self.uow.invites.update(invite)
                revoked_any = True
            elif live is None:
                live = invite
        if revoked_any:
            # Keep the revocations even if the following insert rolls back.
            await self.uow.commit()
        return live

    async def _race_winner(
        self, workspace_id: UUID, email_normalized: str
    ) -> Optional[WorkspaceInvite]:
        pending = await self.uow.invites.get_pending_by_workspace_and_email(
            workspace_id, email_normalized
        )
        return pending[0] if pending else None

    @staticmethod
    def _refresh(
        invite: WorkspaceInvite,
        inviter_user_id: UUID,
        email: str,
        role: WorkspaceRole,
        group_id: Optional[UUID],
        expires_at: datetime,
        now: datetime,
    ) -> None:
        invite.email = email.strip()
        invite.role = role
        invite.group_id = group_id
        invite.invited_by = inviter_user_id
        invite.expires_at = expires_at
        invite.updated_at = now

    async def _provision_invitee(self, email_normalized: str, diagnostics: Diagnostics) -> None:
        linked = await self.identity_resolver.ensure_linked_user(email_normalized)
        if linked.is_err():
            diagnostics.add(
                "identity", f"Invitee account was not provisioned: {linked.error.message}"
            )
            return

        if linked.value.created:
            try:
                await self.identity_resolver.idp.send_action_email(
                    linked.value.external_user_id, ["UPDATE_PASSWORD"]
                )
            except UpstreamError as exc:
                diagnostics.add(
                    "setup_email", f"Keycloak setup email was not sent: {exc.message}"
                )

    async def _send_invite_email(
        self,
        email_normalized: str,
        workspace_name: str,
        action_link: str,
        diagnostics: Diagnostics,
    ) -> None:
        name = html.escape(workspace_name or "workspace")
        link = html.escape(action_link, quote=True)
        body = (
            f"<p>You were invited to join <strong>{name}</strong>.</p>"
            f'<p>Open the invite: <a href="{link}">{link}</a></p>'
            "<p>Sign in with your Keycloak account to accept it.</p>"
        )
        try:
            await self.email_sender.send(
                [email_normalized], f"You were invited to {workspace_name or 'a workspace'}", body
            )
        except UpstreamError as exc:
            logger.warning(f"Invite email to {email_normalized} failed: {exc.message}")
            diagnostics.add("invite_email", exc.message or "Invite email failed.")
