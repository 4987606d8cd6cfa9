"""
Shared httpx plumbing for the outbound adapters.

Network failures become UpstreamUnavailableError; error bodies are reduced
to one human-readable message.
"""

import json
from typing import Any, Iterable, Optional

import httpx

from src.app.services.errors import (
    UpstreamError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)

ERROR_MESSAGE_KEYS = ("error_description", "errorMessage", "message", "error")


def extract_error_message(
    response: httpx.Response, fallback: str, keys: Iterable[str] = ERROR_MESSAGE_KEYS
) -> str:
    """First non-empty message field of a JSON body, else the raw text"""
    text = response.text
    if not text:
        return fallback
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if value:
                return str(value)
    return fallback


def read_json(response: httpx.Response, source: str, expected: type = object) -> Any:
    """Decode a success body; anything but the expected JSON shape is a bad gateway"""
    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamUnavailableError(f"{source} returned a non-JSON response.", 502) from exc
    if not isinstance(payload, expected):
        raise UpstreamUnavailableError(f"{source} returned an unexpected response.", 502)
    return payload


def error_for_response(response: httpx.Response, message: str) -> UpstreamError:
    if response.status_code >= 500:
        return UpstreamUnavailableError(message, response.status_code)
    return UpstreamRejectedError(message, response.status_code)


async def send_request(
    method: str,
    url: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    unavailable_message: str = "Upstream service is unavailable.",
    **kwargs,
) -> httpx.Response:
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            return await client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        raise UpstreamUnavailableError(str(exc) or unavailable_message, 503) from exc
