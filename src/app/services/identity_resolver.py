"""
Identity resolution across the primary directory and the external realm.

``ensure_linked_user`` is look-up-then-create on both sides followed by an
idempotent link upsert, so a resolution that failed half way is completed
by the next call for the same email.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.repositories.identity_link_repository import IdentityLinkConflictError
from src.app.services.errors import UpstreamError
from src.app.services.identity_provider import IIdentityProviderAdmin
from src.app.services.role_synchronizer import MANAGED_REALM_ROLES
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import DirectoryUser, IUserDirectory
from src.domain.entities import normalize_email
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

EXTERNAL_PROVIDER = "keycloak"
DIRECTORY_PAGE_SIZE = 1000
# Upper bound on the directory scan; the directory has no exact email filter.
DIRECTORY_MAX_PAGES = 50

PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789!@#$%^&*"


def make_random_password(length: int = 40) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def sanitize_display_name(display_name: Optional[str]) -> Optional[str]:
    normalized = (display_name or "").strip()
    return normalized or None


def merge_provider_metadata(app_metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Add the external provider marker without dropping existing providers"""
    merged = dict(app_metadata or {})
    providers: List[str] = []
    raw = merged.get("providers")
    if isinstance(raw, list):
        providers = [item for item in raw if isinstance(item, str) and item]
    for provider in (EXTERNAL_PROVIDER, "email"):
        if provider not in providers:
            providers.append(provider)
    merged["providers"] = providers
    merged["provider"] = EXTERNAL_PROVIDER
    return merged


async def list_all_directory_users(
    directory: IUserDirectory,
    per_page: int = DIRECTORY_PAGE_SIZE,
    max_pages: int = DIRECTORY_MAX_PAGES,
) -> List[DirectoryUser]:
    per_page = min(per_page, DIRECTORY_PAGE_SIZE) if per_page > 0 else DIRECTORY_PAGE_SIZE
    max_pages = max_pages if max_pages > 0 else DIRECTORY_MAX_PAGES

    users: List[DirectoryUser] = []
    page = 1
    while page <= max_pages:
        batch = await directory.list_users(page=page, per_page=per_page)
        users.extend(batch)
        if len(batch) < per_page:
            break
        page += 1
    else:
        logger.warning(f"Directory scan stopped at the {max_pages}-page cap")
    return users


async def find_directory_user_by_email(
    directory: IUserDirectory, email: str
) -> Optional[DirectoryUser]:
    target = normalize_email(email)
    if not target:
        return None
    for user in await list_all_directory_users(directory):
        if normalize_email(user.email) == target:
            return user
    return None


@dataclass(frozen=True)
class LinkedIdentity:
    user_id: UUID
    external_user_id: str
    email: str
    created: bool
    directory_created: bool = False


class IdentityResolver:
    """
    Finds or creates one person in both identity stores and links them.

    Expects an entered unit of work; link and profile writes are committed
    before returning.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        idp: IIdentityProviderAdmin,
        directory: IUserDirectory,
    ):
        self.uow = uow
        self.idp = idp
        self.directory = directory

    async def ensure_linked_user(
        self, email: str, display_name: Optional[str] = None
    ) -> Result[LinkedIdentity]:
        """
        Resolve an email to a linked (internal user, realm user) pair.

        Args:
            email: Any casing/whitespace; normalized before use
            display_name: Optional name mirrored to the realm and profile

        Returns:
            Result with LinkedIdentity; created is True only when the realm
            account was minted by this call
        """
        normalized_email = normalize_email(email)
        if not normalized_email:
            return Return.err(Error("INVALID_ARGUMENT", "Email is required."))
        name = sanitize_display_name(display_name)

        try:
            self.idp.ensure_ready()
            await self.idp.ensure_realm_roles(MANAGED_REALM_ROLES)

            external_user, external_created = await self.idp.ensure_user(
                normalized_email,
                display_name=name,
                enabled=True,
                email_verified=True,
                required_actions=["UPDATE_PASSWORD"],
                password=make_random_password(),
            )

            directory_user = await find_directory_user_by_email(
                self.directory, normalized_email
            )
            directory_created = False
            if directory_user is None:
                directory_user = await self.directory.create_user(
                    email=normalized_email,
                    password=make_random_password(),
                    email_confirm=True,
                    app_metadata=merge_provider_metadata(None),
                )
                directory_created = True
                logger.info(f"Created directory user {directory_user.id} for {normalized_email}")

            await self.uow.identity_links.upsert(
                user_id=directory_user.id,
                external_user_id=external_user.id,
                email=normalized_email,
                display_name=name,
                issuer=self.idp.issuer,
            )

            merged_metadata = merge_provider_metadata(directory_user.app_metadata)
            if merged_metadata != (directory_user.app_metadata or {}):
                await self.directory.update_user(
                    directory_user.id, app_metadata=merged_metadata, email_confirm=True
                )

            await self.uow.profiles.upsert(directory_user.id, normalized_email, name)
            await self.uow.commit()
        except IdentityLinkConflictError as exc:
            await self.uow.rollback()
            logger.error(str(exc))
            return Return.err(Error("CONFLICT", str(exc)))
        except UpstreamError as exc:
            await self.uow.rollback()
            logger.warning(f"Identity resolution failed for {normalized_email}: {exc.message}")
            return Return.err(exc.to_error())

        if external_created:
            logger.info(f"Created realm user {external_user.id} for {normalized_email}")

        return Return.ok(
            LinkedIdentity(
                user_id=directory_user.id,
                external_user_id=external_user.id,
                email=normalized_email,
                created=external_created,
                directory_created=directory_created,
            )
        )

    async def find_external_user_id(self, user_id: UUID) -> Optional[str]:
        link = await self.uow.identity_links.get_by_user_id(user_id)
        return link.external_user_id if link else None

    async def resolve_external_user_id(self, user_id: UUID) -> Result[str]:
        """Realm user ID for an internal user, linking by email if needed"""
        external_user_id = await self.find_external_user_id(user_id)
        if external_user_id is not None:
            return Return.ok(external_user_id)

        profile = await self.uow.profiles.get_by_id(user_id)
        email = profile.email if profile else None
        display_name = profile.display_name if profile else None
        if not email:
            try:
                directory_user = await self.directory.get_user(user_id)
            except UpstreamError as exc:
                return Return.err(exc.to_error())
            if directory_user is None or not directory_user.email:
                return Return.err(
                    Error("USER_NOT_FOUND", "Failed to resolve user for role sync.")
                )
            email = directory_user.email

        linked = await self.ensure_linked_user(email, display_name)
        if linked.is_err():
            return Return.err(linked.error)
        return Return.ok(linked.value.external_user_id)
