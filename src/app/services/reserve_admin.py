"""
Reserve super-admin bootstrap.

The reserve admin is an always-present super admin with a known password,
never a workspace member, and hidden from every user or assignee listing.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set, TypeVar
from uuid import UUID

from src.app.services.errors import IdentityProviderNotConfiguredError, UpstreamError
from src.app.services.identity_resolver import (
    IdentityResolver,
    find_directory_user_by_email,
    merge_provider_metadata,
)
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.domain.entities import AuditEvent, normalize_email
from src.libs.result import Result, Return

logger = logging.getLogger(__name__)

RESERVE_ADMIN_DISPLAY_NAME = "Reserve super admin"

T = TypeVar("T")


@dataclass(frozen=True)
class ReserveAdminStatus:
    configured: bool
    user_id: Optional[UUID] = None
    email: Optional[str] = None
    realm_linked: bool = False


class ReserveAdminFilter:
    """
    Hides the reserve admin (and optionally super admins) from listings.

    Every user-listing and assignee-listing path must run its rows through
    this filter; the bootstrap itself cannot enforce it.
    """

    def __init__(self, reserve_email: Optional[str], hidden_user_ids: Iterable[UUID] = ()):
        self.reserve_email = normalize_email(reserve_email)
        self.hidden_user_ids: Set[UUID] = set(hidden_user_ids)

    def is_hidden(self, user_id: Optional[UUID] = None, email: Optional[str] = None) -> bool:
        if user_id is not None and user_id in self.hidden_user_ids:
            return True
        return bool(self.reserve_email) and normalize_email(email) == self.reserve_email

    def apply(
        self,
        rows: Iterable[T],
        email_of: Callable[[T], Optional[str]],
        user_id_of: Optional[Callable[[T], Optional[UUID]]] = None,
    ) -> List[T]:
        return [
            row
            for row in rows
            if not self.is_hidden(
                user_id=user_id_of(row) if user_id_of else None, email=email_of(row)
            )
        ]


class ReserveAdminBootstrap:
    """
    Idempotently provisions the configured reserve super admin.

    Success is memoized per process; ``force=True`` runs it again.
    """

    _synced = False

    def __init__(
        self,
        resolver: IdentityResolver,
        synchronizer: RealmRoleSynchronizer,
        email: Optional[str],
        password: Optional[str],
    ):
        self.resolver = resolver
        self.synchronizer = synchronizer
        self.uow = resolver.uow
        self.directory = resolver.directory
        self.idp = resolver.idp
        self.email = normalize_email(email)
        self.password = password or ""

    @classmethod
    def reset(cls) -> None:
        cls._synced = False

    @property
    def configured(self) -> bool:
        return bool(self.email and self.password)

    async def ensure_reserve_admin(self, force: bool = False) -> Result[ReserveAdminStatus]:
        """
        Provision the reserve admin once per process, or again when forced.

        Directory side: find-or-create, force the configured password, drop
        every workspace membership, register as super admin. Realm side,
        when the realm is configured: link the identity, set the same
        password and push realm roles.
        """
        if not self.configured:
            return Return.ok(ReserveAdminStatus(configured=False))
        if ReserveAdminBootstrap._synced and not force:
            return Return.ok(ReserveAdminStatus(configured=True, email=self.email))

        async with self.uow:
            try:
                directory_user = await find_directory_user_by_email(self.directory, self.email)
                if directory_user is None:
                    directory_user = await self.directory.create_user(
                        email=self.email,
                        password=self.password,
                        email_confirm=True,
                        app_metadata=merge_provider_metadata(None),
                    )
                    logger.info(f"Created reserve admin {directory_user.id}")
                await self.directory.update_user(
                    directory_user.id, password=self.password, email_confirm=True
                )
            except UpstreamError as exc:
                logger.error(f"Reserve admin setup failed: {exc.message}")
                return Return.err(exc.to_error())

            user_id = directory_user.id
            removed = await self.uow.memberships.delete_by_user_id(user_id)
            await self.uow.super_admins.add(user_id)
            await self.uow.profiles.upsert(user_id, self.email, RESERVE_ADMIN_DISPLAY_NAME)
            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="reserve_admin_synced",
                    event_metadata={"removed_memberships": removed},
                )
            )
            await self.uow.commit()

            realm_linked = False
            try:
                self.idp.ensure_ready()
            except IdentityProviderNotConfiguredError:
                logger.info("Realm is not configured; reserve admin kept directory-only")
            else:
                linked = await self.resolver.ensure_linked_user(
                    self.email, RESERVE_ADMIN_DISPLAY_NAME
                )
                if linked.is_err():
                    return Return.err(linked.error)
                try:
                    await self.idp.set_password(
                        linked.value.external_user_id, self.password, temporary=False
                    )
                except UpstreamError as exc:
                    return Return.err(exc.to_error())
                synced = await self.synchronizer.sync_user(
                    self.uow, user_id, external_user_id=linked.value.external_user_id
                )
                if synced.is_err():
                    return Return.err(synced.error)
                realm_linked = True

        ReserveAdminBootstrap._synced = True
        return Return.ok(
            ReserveAdminStatus(
                configured=True, user_id=user_id, email=self.email, realm_linked=realm_linked
            )
        )
