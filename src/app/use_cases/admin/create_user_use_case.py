"""
Create User Use Case

Provisions a person in both identity stores from the admin console.
"""

import logging
from typing import Optional

from src.app.services.diagnostics import Diagnostics
from src.app.services.errors import UpstreamError
from src.app.services.identity_resolver import IdentityResolver, sanitize_display_name
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.domain.entities import normalize_email
from src.libs.result import Error, Result, Return

from .dtos import CreatedUser, CreateUserResponse

logger = logging.getLogger(__name__)


class CreateUserUseCase:
    """
    Use case for creating a user as a super admin.

    Business Rules:
    - Resolution is idempotent; an existing user is linked, not duplicated
    - A newly minted realm account gets a "set password" action email;
      failure to send it is a warning
    - Realm roles are synced right away; failure is an error
    """

    def __init__(self, identity_resolver: IdentityResolver, synchronizer: RealmRoleSynchronizer):
        self.identity_resolver = identity_resolver
        self.synchronizer = synchronizer

    async def execute(
        self, email: str, display_name: Optional[str] = None
    ) -> Result[CreateUserResponse]:
        normalized = normalize_email(email)
        if not normalized:
            return Return.err(Error("INVALID_ARGUMENT", "email is required"))

        uow = self.identity_resolver.uow
        async with uow:
            linked = await self.identity_resolver.ensure_linked_user(normalized, display_name)
            if linked.is_err():
                return Return.err(linked.error)
            identity = linked.value

            diagnostics = Diagnostics()
            if identity.created:
                try:
                    await self.identity_resolver.idp.send_action_email(
                        identity.external_user_id, ["UPDATE_PASSWORD"]
                    )
                except UpstreamError as exc:
                    logger.warning(f"Setup email for {normalized} failed: {exc.message}")
                    diagnostics.add(
                        "setup_email",
                        f"User created, but Keycloak setup email failed: {exc.message}",
                    )

            synced = await self.synchronizer.sync_user(
                uow, identity.user_id, external_user_id=identity.external_user_id
            )
            if synced.is_err():
                return Return.err(synced.error)

        return Return.ok(
            CreateUserResponse(
                user=CreatedUser(
                    id=str(identity.user_id),
                    email=normalized,
                    display_name=sanitize_display_name(display_name),
                ),
                warning=diagnostics.warning(),
                warnings=diagnostics.messages(),
            )
        )
