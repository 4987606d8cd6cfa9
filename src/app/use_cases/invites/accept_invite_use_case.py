"""
Accept Invite Use Case

Turns a pending invite into a workspace membership for the invitee.
"""

import logging
from uuid import UUID

from src.app.services.diagnostics import Diagnostics
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.entities import (
    Accepted,
    AuditEvent,
    InviteRevokedReason,
    Revoked,
    normalize_email,
)
from src.libs.result import Error, Result, Return

from .dtos import AcceptInviteResponse

logger = logging.getLogger(__name__)


class AcceptInviteUseCase:
    """
    Use case for accepting a workspace invite.

    Business Rules:
    - The caller's authenticated email must match the invite
    - Revoked invites cannot be accepted
    - Expiry is re-checked here; a stale invite is revoked as expired
    - Accepting twice succeeds only while the caller is still a member
    - Membership and accepted_at commit together; realm role sync runs
      afterwards and its failure is reported as a warning
    """

    def __init__(
        self,
        uow: UnitOfWork,
        identity_resolver: IdentityResolver,
        synchronizer: RealmRoleSynchronizer,
    ):
        self.uow = uow
        self.identity_resolver = identity_resolver
        self.synchronizer = synchronizer

    async def execute(
        self, user_id: UUID, user_email: str, token: str
    ) -> Result[AcceptInviteResponse]:
        """
        Execute accept invite use case.

        Args:
            user_id: Authenticated caller (primary directory user id)
            user_email: Email from the caller's session
            token: Invite token

        Returns:
            Result with AcceptInviteResponse DTO, or Error
        """
        if not token:
            return Return.err(Error("INVALID_ARGUMENT", "token is required"))

        async with self.uow:
            invite = await self.uow.invites.get_by_token(token)
            if invite is None:
                return Return.err(Error("INVITE_NOT_FOUND", "Invite not found."))

            caller_email = normalize_email(user_email)
            if not caller_email or caller_email != invite.email_normalized:
                return Return.err(
                    Error("FORBIDDEN", "This invite was sent to a different email address.")
                )

            workspace_id = invite.workspace_id
            state = invite.state

            if isinstance(state, Revoked):
                if state.reason == InviteRevokedReason.expired:
                    return Return.err(Error("INVITE_EXPIRED", "Invite has expired."))
                return Return.err(Error("INVITE_REVOKED", "Invite is no longer valid."))

            if isinstance(state, Accepted):
                membership = await self.uow.memberships.get_by_user_and_workspace(
                    user_id, workspace_id
                )
                if membership is None:
                    return Return.err(
                        Error("INVITE_ALREADY_ACCEPTED", "Invite was already accepted.")
                    )
                return Return.ok(
                    AcceptInviteResponse(
                        workspace_id=str(workspace_id),
                        role=membership.role.value,
                        already_accepted=True,
                    )
                )

            now = utcnow()
            if invite.is_expired(now):
                invite.mark_revoked(InviteRevokedReason.expired, now)
                await self.uow.invites.update(invite)
                await self.uow.audit_events.create(
                    AuditEvent(
                        workspace_id=workspace_id,
                        user_id=user_id,
                        action="invite_expired",
                        event_metadata={"invite_id": str(invite.id)},
                    )
                )
                await self.uow.commit()
                return Return.err(Error("INVITE_EXPIRED", "Invite has expired."))

            role = invite.role
            await self.uow.memberships.upsert(
                workspace_id=workspace_id,
                user_id=user_id,
                role=role,
                group_id=invite.group_id,
            )
            invite.mark_accepted(now)
            await self.uow.invites.update(invite)
            await self.uow.profiles.upsert(user_id, caller_email)
            await self.uow.audit_events.create(
                AuditEvent(
                    workspace_id=workspace_id,
                    user_id=user_id,
                    action="invite_accepted",
                    event_metadata={"invite_id": str(invite.id), "role": role.value},
                )
            )
            await self.uow.commit()

            diagnostics = Diagnostics()
            await self._sync_realm_roles(user_id, caller_email, diagnostics)

            return Return.ok(
                AcceptInviteResponse(
                    workspace_id=str(workspace_id),
                    role=role.value,
                    warning=diagnostics.warning(),
                    warnings=diagnostics.messages(),
                )
            )

    async def _sync_realm_roles(
        self, user_id: UUID, email: str, diagnostics: Diagnostics
    ) -> None:
        linked = await self.identity_resolver.ensure_linked_user(email)
        if linked.is_err():
            logger.warning(f"Identity link after accept failed for {user_id}: {linked.error.message}")
            diagnostics.add("identity", f"Keycloak sync skipped: {linked.error.message}")
            return

        synced = await self.synchronizer.sync_user(
            self.uow, user_id, external_user_id=linked.value.external_user_id
        )
        if synced.is_err():
            diagnostics.add("role_sync", f"Keycloak role sync failed: {synced.error.message}")
