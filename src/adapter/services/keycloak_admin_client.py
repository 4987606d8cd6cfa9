"""
Keycloak Admin REST client.

Authenticates with a password grant against the admin realm and keeps the
admin token in one process-wide slot. Every admin call is retried once
with a fresh token when Keycloak answers 401.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

import httpx

from src.adapter.services.http import (
    error_for_response,
    extract_error_message,
    read_json,
    send_request,
)
from src.app.services.errors import (
    IdentityProviderNotConfiguredError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from src.app.services.identity_provider import (
    ExternalUser,
    IIdentityProviderAdmin,
    RealmRoleRef,
)
from src.domain.entities import normalize_email

logger = logging.getLogger(__name__)

TOKEN_REFRESH_MARGIN_SECONDS = 30
DEFAULT_TOKEN_LIFETIME_SECONDS = 60


@dataclass(frozen=True)
class KeycloakSettings:
    base_url: str
    realm: str
    admin_realm: str = "master"
    admin_client_id: str = "admin-cli"
    admin_username: str = ""
    admin_password: str = ""
    app_client_id: str = ""
    app_redirect_uri: str = ""
    timeout_seconds: float = 10.0

    @classmethod
    def from_config(cls, config) -> "KeycloakSettings":
        return cls(
            base_url=(config.KEYCLOAK_URL or "").rstrip("/"),
            realm=config.KEYCLOAK_REALM,
            admin_realm=config.KEYCLOAK_ADMIN_REALM,
            admin_client_id=config.KEYCLOAK_ADMIN_CLIENT_ID,
            admin_username=config.KEYCLOAK_ADMIN,
            admin_password=config.KEYCLOAK_ADMIN_PASSWORD,
            app_client_id=config.KEYCLOAK_APP_CLIENT_ID,
            app_redirect_uri=f"{config.APP_URL}/auth",
            timeout_seconds=float(config.KEYCLOAK_TIMEOUT_SECONDS),
        )

    @property
    def cache_key(self) -> Tuple[str, str, str, str]:
        return (self.base_url, self.admin_realm, self.admin_client_id, self.admin_username)


@dataclass
class _CachedToken:
    cache_key: Tuple[str, str, str, str]
    token: str
    expires_at: float


class AdminTokenCache:
    """
    Single-slot admin token cache shared by every client in the process.

    The lock only avoids redundant refreshes; two refreshes racing each
    other are harmless.
    """

    _entry: Optional[_CachedToken] = None
    _lock: Optional[asyncio.Lock] = None

    @classmethod
    def lock(cls) -> asyncio.Lock:
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    def get(cls, cache_key: Tuple[str, str, str, str], now: float) -> Optional[str]:
        entry = cls._entry
        if entry is None or entry.cache_key != cache_key:
            return None
        if entry.expires_at <= now + TOKEN_REFRESH_MARGIN_SECONDS:
            return None
        return entry.token

    @classmethod
    def store(cls, cache_key: Tuple[str, str, str, str], token: str, expires_at: float) -> None:
        cls._entry = _CachedToken(cache_key=cache_key, token=token, expires_at=expires_at)

    @classmethod
    def clear(cls) -> None:
        cls._entry = None
        cls._lock = None


def parse_keycloak_error(response: httpx.Response) -> str:
    fallback = f"Keycloak request failed: {response.status_code} {response.reason_phrase}".strip()
    return extract_error_message(response, fallback)


def split_display_name(display_name: Optional[str]) -> Tuple[str, str]:
    parts = (display_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _path(value: str) -> str:
    return quote(value, safe="")


class KeycloakAdminClient(IIdentityProviderAdmin):
    """IIdentityProviderAdmin implementation over the Keycloak Admin REST API"""

    def __init__(
        self,
        settings: KeycloakSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    @property
    def issuer(self) -> str:
        return f"{self.settings.base_url}/realms/{self.settings.realm}"

    @property
    def _realm_path(self) -> str:
        return f"/admin/realms/{_path(self.settings.realm)}"

    def ensure_ready(self) -> None:
        missing = [
            name
            for name, value in (
                ("KEYCLOAK_URL", self.settings.base_url),
                ("KEYCLOAK_ADMIN", self.settings.admin_username),
                ("KEYCLOAK_ADMIN_PASSWORD", self.settings.admin_password),
            )
            if not value
        ]
        if missing:
            raise IdentityProviderNotConfiguredError(
                f"Keycloak admin is not configured (missing {', '.join(missing)}).", 500
            )

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        return await send_request(
            method,
            url,
            timeout=self.settings.timeout_seconds,
            transport=self._transport,
            unavailable_message="Failed to reach Keycloak API.",
            **kwargs,
        )

    async def get_admin_token(self, force_refresh: bool = False) -> str:
        self.ensure_ready()
        cache_key = self.settings.cache_key

        async with AdminTokenCache.lock():
            if not force_refresh:
                cached = AdminTokenCache.get(cache_key, time.time())
                if cached:
                    return cached

            token_url = (
                f"{self.settings.base_url}/realms/{_path(self.settings.admin_realm)}"
                "/protocol/openid-connect/token"
            )
            response = await self._send(
                "POST",
                token_url,
                data={
                    "grant_type": "password",
                    "client_id": self.settings.admin_client_id,
                    "username": self.settings.admin_username,
                    "password": self.settings.admin_password,
                },
            )
            if not response.is_success:
                raise error_for_response(response, parse_keycloak_error(response))

            payload = read_json(response, "Keycloak token endpoint", dict)
            token = payload.get("access_token")
            if not token:
                raise UpstreamUnavailableError(
                    "Keycloak admin token response is missing access_token.", 502
                )
            expires_in = payload.get("expires_in") or DEFAULT_TOKEN_LIFETIME_SECONDS
            AdminTokenCache.store(cache_key, token, time.time() + float(expires_in))
            logger.debug(f"Fetched Keycloak admin token (expires in {expires_in}s)")
            return token

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.settings.base_url}{path}"
        token = await self.get_admin_token()
        response = await self._send(
            method, url, headers={"Authorization": f"Bearer {token}"}, **kwargs
        )
        if response.status_code == 401:
            logger.info("Keycloak rejected cached admin token; refreshing once")
            token = await self.get_admin_token(force_refresh=True)
            response = await self._send(
                method, url, headers={"Authorization": f"Bearer {token}"}, **kwargs
            )
        return response

    @staticmethod
    def _check(response: httpx.Response, allowed: Iterable[int] = ()) -> None:
        if response.is_success or response.status_code in allowed:
            return
        raise error_for_response(response, parse_keycloak_error(response))

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def find_user_by_email(self, email: str) -> Optional[ExternalUser]:
        normalized = normalize_email(email)
        if not normalized:
            raise UpstreamRejectedError("Email is required.", 400)

        response = await self._request(
            "GET",
            f"{self._realm_path}/users",
            params={"email": normalized, "exact": "true"},
        )
        self._check(response)
        users = read_json(response, "Keycloak user search", list)
        if not users:
            return None
        exact = next(
            (user for user in users if normalize_email(user.get("email")) == normalized),
            None,
        )
        return ExternalUser.from_representation(exact or users[0])

    async def find_user_by_id(self, user_id: str) -> Optional[ExternalUser]:
        response = await self._request("GET", f"{self._realm_path}/users/{_path(user_id)}")
        if response.status_code == 404:
            return None
        self._check(response)
        return ExternalUser.from_representation(read_json(response, "Keycloak user lookup", dict))

    async def create_user(
        self,
        email: str,
        display_name: Optional[str] = None,
        enabled: bool = True,
        email_verified: bool = True,
        required_actions: Optional[List[str]] = None,
        password: Optional[str] = None,
    ) -> ExternalUser:
        normalized = normalize_email(email)
        first_name, last_name = split_display_name(display_name)
        representation: Dict[str, Any] = {
            "username": normalized,
            "email": normalized,
            "enabled": enabled,
            "emailVerified": email_verified,
        }
        if first_name:
            representation["firstName"] = first_name
        if last_name:
            representation["lastName"] = last_name
        if required_actions:
            representation["requiredActions"] = list(required_actions)
        if password:
            representation["credentials"] = [
                {"type": "password", "value": password, "temporary": False}
            ]

        response = await self._request("POST", f"{self._realm_path}/users", json=representation)
        self._check(response, allowed=(201, 409))

        created = await self.find_user_by_email(normalized)
        if created is None:
            raise UpstreamRejectedError("Failed to resolve created Keycloak user.", 404)
        return created

    async def update_user(self, user_id: str, representation: Dict[str, Any]) -> None:
        response = await self._request(
            "PUT", f"{self._realm_path}/users/{_path(user_id)}", json=representation
        )
        self._check(response)

    async def ensure_user(
        self,
        email: str,
        display_name: Optional[str] = None,
        enabled: bool = True,
        email_verified: bool = True,
        required_actions: Optional[List[str]] = None,
        password: Optional[str] = None,
    ) -> Tuple[ExternalUser, bool]:
        normalized = normalize_email(email)
        if not normalized:
            raise UpstreamRejectedError("Email is required.", 400)

        existing = await self.find_user_by_email(normalized)
        if existing is None:
            created = await self.create_user(
                normalized,
                display_name=display_name,
                enabled=enabled,
                email_verified=email_verified,
                required_actions=required_actions,
                password=password,
            )
            return created, True

        first_name, last_name = split_display_name(display_name)
        drifted = (
            (existing.username or "") != normalized
            or (existing.email or "") != normalized
            or (existing.enabled if existing.enabled is not None else True) != enabled
            or bool(existing.email_verified) != email_verified
            or (display_name is not None and (existing.first_name or "") != first_name)
            or (display_name is not None and (existing.last_name or "") != last_name)
        )
        if not drifted:
            return existing, False

        representation: Dict[str, Any] = {
            "username": normalized,
            "email": normalized,
            "enabled": enabled,
            "emailVerified": email_verified,
        }
        if display_name is not None:
            representation["firstName"] = first_name
            representation["lastName"] = last_name
        await self.update_user(existing.id, representation)

        refreshed = await self.find_user_by_id(existing.id)
        return refreshed or existing, False

    async def set_password(self, user_id: str, password: str, temporary: bool = False) -> None:
        if not password:
            raise UpstreamRejectedError("Password is required.", 400)
        response = await self._request(
            "PUT",
            f"{self._realm_path}/users/{_path(user_id)}/reset-password",
            json={"type": "password", "value": password, "temporary": temporary},
        )
        self._check(response)

    async def send_action_email(self, user_id: str, actions: Optional[List[str]] = None) -> None:
        params = {}
        if self.settings.app_client_id:
            params["client_id"] = self.settings.app_client_id
        if self.settings.app_redirect_uri:
            params["redirect_uri"] = self.settings.app_redirect_uri
        response = await self._request(
            "PUT",
            f"{self._realm_path}/users/{_path(user_id)}/execute-actions-email",
            params=params,
            json=list(actions or ["UPDATE_PASSWORD"]),
        )
        self._check(response)

    async def delete_user(self, user_id: str) -> None:
        response = await self._request("DELETE", f"{self._realm_path}/users/{_path(user_id)}")
        self._check(response, allowed=(404,))

    # ------------------------------------------------------------------
    # Realm roles
    # ------------------------------------------------------------------

    async def get_user_realm_roles(self, user_id: str) -> List[RealmRoleRef]:
        response = await self._request(
            "GET", f"{self._realm_path}/users/{_path(user_id)}/role-mappings/realm"
        )
        self._check(response)
        return [
            RealmRoleRef(id=role.get("id", ""), name=role["name"])
            for role in read_json(response, "Keycloak role mappings", list)
            if isinstance(role, dict) and role.get("name")
        ]

    async def get_realm_role(self, role_name: str) -> Optional[RealmRoleRef]:
        response = await self._request("GET", f"{self._realm_path}/roles/{_path(role_name)}")
        if response.status_code == 404:
            return None
        self._check(response)
        payload = read_json(response, "Keycloak role lookup", dict)
        return RealmRoleRef(id=payload.get("id", ""), name=payload.get("name", role_name))

    async def create_realm_role_if_missing(self, role_name: str) -> RealmRoleRef:
        existing = await self.get_realm_role(role_name)
        if existing is not None:
            return existing

        response = await self._request(
            "POST", f"{self._realm_path}/roles", json={"name": role_name}
        )
        self._check(response, allowed=(201, 409))
        if response.status_code == 201:
            logger.info(f"Created realm role {role_name}")

        created = await self.get_realm_role(role_name)
        if created is None:
            raise UpstreamRejectedError(f"Failed to resolve realm role {role_name}.", 404)
        return created

    async def ensure_realm_roles(self, role_names: Iterable[str]) -> Dict[str, RealmRoleRef]:
        roles: Dict[str, RealmRoleRef] = {}
        for name in dict.fromkeys(role_names):
            if name:
                roles[name] = await self.create_realm_role_if_missing(name)
        return roles

    async def add_realm_roles_to_user(self, user_id: str, roles: List[RealmRoleRef]) -> None:
        if not roles:
            return
        response = await self._request(
            "POST",
            f"{self._realm_path}/users/{_path(user_id)}/role-mappings/realm",
            json=[role.to_representation() for role in roles],
        )
        self._check(response)

    async def remove_realm_roles_from_user(self, user_id: str, roles: List[RealmRoleRef]) -> None:
        if not roles:
            return
        response = await self._request(
            "DELETE",
            f"{self._realm_path}/users/{_path(user_id)}/role-mappings/realm",
            json=[role.to_representation() for role in roles],
        )
        self._check(response)

