"""
Resend transactional email sender.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from src.adapter.services.http import error_for_response, extract_error_message, send_request
from src.app.services.email_sender import IEmailSender
from src.app.services.errors import EmailNotConfiguredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailSettings:
    api_url: str
    api_key: str
    sender: str
    timeout_seconds: float = 10.0

    @classmethod
    def from_config(cls, config) -> "EmailSettings":
        return cls(
            api_url=config.RESEND_API_URL,
            api_key=config.RESEND_API_KEY,
            sender=config.RESEND_FROM,
            timeout_seconds=float(config.EMAIL_TIMEOUT_SECONDS),
        )


class ResendEmailSender(IEmailSender):
    def __init__(
        self,
        settings: EmailSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    async def send(self, to: List[str], subject: str, html: str) -> None:
        if not self.settings.api_key or not self.settings.sender:
            raise EmailNotConfiguredError("Invite email skipped: email provider is not configured.")

        response = await send_request(
            "POST",
            self.settings.api_url,
            timeout=self.settings.timeout_seconds,
            transport=self._transport,
            unavailable_message="Failed to reach email provider.",
            headers={"Authorization": f"Bearer {self.settings.api_key}"},
            json={"from": self.settings.sender, "to": to, "subject": subject, "html": html},
        )
        if not response.is_success:
            fallback = f"Email provider error: {response.status_code}"
            message = extract_error_message(response, fallback, ("message", "error"))
            raise error_for_response(response, f"Invite email failed: {message}")

        logger.info(f"Sent email '{subject}' to {len(to)} recipient(s)")
