"""
Sync All Users Use Case

Links every directory user to the realm and pushes their realm roles.
"""

import logging

from src.app.services.errors import UpstreamError
from src.app.services.identity_resolver import IdentityResolver, list_all_directory_users
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.domain.entities import AuditEvent
from src.libs.result import Result, Return

from .dtos import SyncSummary

logger = logging.getLogger(__name__)


class SyncAllUsersUseCase:
    """
    Use case for the whole-directory realm migration.

    Business Rules:
    - Fails as a whole only when the realm is not configured or the
      directory cannot be listed
    - Per-user failures are collected in the summary and do not stop the run
    """

    def __init__(self, identity_resolver: IdentityResolver, synchronizer: RealmRoleSynchronizer):
        self.identity_resolver = identity_resolver
        self.synchronizer = synchronizer

    async def execute(self) -> Result[SyncSummary]:
        try:
            self.identity_resolver.idp.ensure_ready()
            directory_users = await list_all_directory_users(self.identity_resolver.directory)
        except UpstreamError as exc:
            return Return.err(exc.to_error())

        summary = SyncSummary()
        uow = self.identity_resolver.uow
        async with uow:
            for user in directory_users:
                if not user.email:
                    continue

                profile = await uow.profiles.get_by_id(user.id)
                linked = await self.identity_resolver.ensure_linked_user(
                    user.email, profile.display_name if profile else None
                )
                if linked.is_err():
                    summary.errors.append(f"User {user.id}: {linked.error.message}")
                    continue

                identity = linked.value
                summary.processed += 1
                if identity.created:
                    summary.created_keycloak_users += 1
                if identity.directory_created:
                    summary.created_directory_users += 1
                if identity.user_id != user.id:
                    summary.warnings.append(
                        f"User {identity.email}: linked to directory user {identity.user_id}"
                    )

                synced = await self.synchronizer.sync_user(
                    uow, identity.user_id, external_user_id=identity.external_user_id
                )
                if synced.is_err():
                    summary.errors.append(
                        f"Role sync failed for {identity.email}: {synced.error.message}"
                    )
                    continue
                if synced.value.changed:
                    summary.role_assignments_updated += 1

            await uow.audit_events.create(
                AuditEvent(
                    action="roles_synced",
                    event_metadata={
                        "processed": summary.processed,
                        "updated": summary.role_assignments_updated,
                        "errors": len(summary.errors),
                    },
                )
            )
            await uow.commit()

        if summary.errors:
            logger.error(f"Realm sync completed with errors: {summary.errors}")
        return Return.ok(summary)
