"""
GoTrue admin API client for the primary user directory.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx

from src.adapter.services.http import (
    error_for_response,
    extract_error_message,
    read_json,
    send_request,
)
from src.app.services.errors import DirectoryNotConfiguredError, UpstreamUnavailableError
from src.app.services.user_directory import DirectoryUser, IUserDirectory
from src.domain.clock import as_naive_utc

logger = logging.getLogger(__name__)

DIRECTORY_ERROR_KEYS = ("msg", "error_description", "message", "error")


@dataclass(frozen=True)
class DirectorySettings:
    base_url: str
    service_key: str
    timeout_seconds: float = 10.0

    @classmethod
    def from_config(cls, config) -> "DirectorySettings":
        return cls(
            base_url=(config.DIRECTORY_URL or "").rstrip("/"),
            service_key=config.DIRECTORY_SERVICE_KEY,
            timeout_seconds=float(config.DIRECTORY_TIMEOUT_SECONDS),
        )


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return as_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def directory_user_from_payload(payload: Dict[str, Any]) -> DirectoryUser:
    return DirectoryUser(
        id=UUID(str(payload["id"])),
        email=payload.get("email"),
        created_at=_parse_timestamp(payload.get("created_at")),
        last_sign_in_at=_parse_timestamp(payload.get("last_sign_in_at")),
        app_metadata=dict(payload.get("app_metadata") or {}),
    )


class GoTrueUserDirectory(IUserDirectory):
    """IUserDirectory implementation over the GoTrue /admin/users endpoints"""

    def __init__(
        self,
        settings: DirectorySettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        if not self.settings.base_url or not self.settings.service_key:
            raise DirectoryNotConfiguredError("User directory is not configured.", 500)

        headers = {
            "apikey": self.settings.service_key,
            "Authorization": f"Bearer {self.settings.service_key}",
        }
        return await send_request(
            method,
            f"{self.settings.base_url}/auth/v1{path}",
            timeout=self.settings.timeout_seconds,
            transport=self._transport,
            unavailable_message="Failed to reach user directory.",
            headers=headers,
            **kwargs,
        )

    @staticmethod
    def _check(response: httpx.Response) -> None:
        if response.is_success:
            return
        fallback = f"Directory request failed: {response.status_code} {response.reason_phrase}".strip()
        raise error_for_response(
            response, extract_error_message(response, fallback, DIRECTORY_ERROR_KEYS)
        )

    @staticmethod
    def _user(response: httpx.Response) -> DirectoryUser:
        payload = read_json(response, "Directory", dict)
        # Some GoTrue versions wrap the record in {"user": {...}}
        if isinstance(payload.get("user"), dict):
            payload = payload["user"]
        if "id" not in payload:
            raise UpstreamUnavailableError("Directory returned an unexpected user payload.", 502)
        return directory_user_from_payload(payload)

    async def list_users(self, page: int, per_page: int) -> List[DirectoryUser]:
        response = await self._request(
            "GET", "/admin/users", params={"page": page, "per_page": per_page}
        )
        self._check(response)
        payload = read_json(response, "Directory user listing", (dict, list))
        rows = payload.get("users", []) if isinstance(payload, dict) else payload
        return [directory_user_from_payload(row) for row in rows or []]

    async def get_user(self, user_id: UUID) -> Optional[DirectoryUser]:
        response = await self._request("GET", f"/admin/users/{user_id}")
        if response.status_code == 404:
            return None
        self._check(response)
        return self._user(response)

    async def create_user(
        self,
        email: str,
        password: str,
        email_confirm: bool = True,
        app_metadata: Optional[Dict[str, Any]] = None,
    ) -> DirectoryUser:
        body: Dict[str, Any] = {
            "email": email,
            "password": password,
            "email_confirm": email_confirm,
        }
        if app_metadata is not None:
            body["app_metadata"] = app_metadata
        response = await self._request("POST", "/admin/users", json=body)
        self._check(response)
        return self._user(response)

    async def update_user(
        self,
        user_id: UUID,
        app_metadata: Optional[Dict[str, Any]] = None,
        password: Optional[str] = None,
        email_confirm: Optional[bool] = None,
        email: Optional[str] = None,
    ) -> DirectoryUser:
        body: Dict[str, Any] = {}
        if email is not None:
            body["email"] = email
        if app_metadata is not None:
            body["app_metadata"] = app_metadata
        if password is not None:
            body["password"] = password
        if email_confirm is not None:
            body["email_confirm"] = email_confirm
        response = await self._request("PUT", f"/admin/users/{user_id}", json=body)
        self._check(response)
        return self._user(response)

    async def delete_user(self, user_id: UUID) -> None:
        response = await self._request("DELETE", f"/admin/users/{user_id}")
        self._check(response)
        logger.info(f"Deleted directory user {user_id}")
