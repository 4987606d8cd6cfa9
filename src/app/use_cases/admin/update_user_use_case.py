"""
Update User Use Case

Edits a user's email or display name from the admin console and keeps the
realm account linked to the result.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.errors import UpstreamError
from src.app.services.identity_resolver import IdentityResolver, sanitize_display_name
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.domain.entities import AuditEvent, normalize_email
from src.libs.result import Error, Result, Return

from .dtos import AdminActionResponse

logger = logging.getLogger(__name__)


class UpdateUserUseCase:
    """
    Use case for editing a user as a super admin.

    Business Rules:
    - An email change is written to the directory first (confirmed)
    - The user is then resolved again by the final email, which relinks the
      realm account and mirrors the display name to realm and profile
    - Realm roles are re-synced against the (possibly new) realm account
    - Super-admin status is not editable here; it follows the realm role
    """

    def __init__(self, identity_resolver: IdentityResolver, synchronizer: RealmRoleSynchronizer):
        self.identity_resolver = identity_resolver
        self.synchronizer = synchronizer

    async def execute(
        self,
        user_id: UUID,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> Result[AdminActionResponse]:
        directory = self.identity_resolver.directory
        try:
            directory_user = await directory.get_user(user_id)
        except UpstreamError as exc:
            return Return.err(exc.to_error())
        if directory_user is None:
            return Return.err(Error("USER_NOT_FOUND", "User not found."))

        current_email = normalize_email(directory_user.email)
        next_email = normalize_email(email)
        final_email = next_email or current_email
        if not final_email:
            return Return.err(Error("INVALID_ARGUMENT", "User has no email address."))

        if next_email and next_email != current_email:
            try:
                await directory.update_user(user_id, email=next_email, email_confirm=True)
            except UpstreamError as exc:
                return Return.err(exc.to_error())
            logger.info(f"Changed directory email of {user_id} to {next_email}")

        uow = self.identity_resolver.uow
        async with uow:
            name = sanitize_display_name(display_name)
            if name is None:
                profile = await uow.profiles.get_by_id(user_id)
                name = profile.display_name if profile else None

            if final_email != current_email:
                link = await uow.identity_links.get_by_user_id(user_id)
                if link is not None:
                    try:
                        self.identity_resolver.idp.ensure_ready()
                        await self.identity_resolver.idp.update_user(
                            link.external_user_id,
                            {"email": final_email, "username": final_email},
                        )
                    except UpstreamError as exc:
                        return Return.err(exc.to_error())

            linked = await self.identity_resolver.ensure_linked_user(final_email, name)
            if linked.is_err():
                return Return.err(linked.error)
            if linked.value.user_id != user_id:
                return Return.err(
                    Error("CONFLICT", f"{final_email} belongs to a different user.")
                )

            synced = await self.synchronizer.sync_user(
                uow, user_id, external_user_id=linked.value.external_user_id
            )
            if synced.is_err():
                return Return.err(synced.error)

            await uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="user_updated",
                    event_metadata={
                        "email": final_email,
                        "email_changed": final_email != current_email,
                    },
                )
            )
            await uow.commit()

        return Return.ok(AdminActionResponse(user_id=str(user_id)))
