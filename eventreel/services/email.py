"""Transactional email clients.

``BrevoEmailClient`` posts template emails to the Brevo API. Without an API key
``ConsoleEmailClient`` is used instead: it logs the recipient and
template (the params, which carry reset codes, only at DEBUG) and reports 201.
"""

import logging
from typing import Any, Protocol

import httpx

from eventreel.config import Settings

logger = logging.getLogger(__name__)


class EmailClient(Protocol):
    def send_template_email(self, to_email: str, template_id: int, params: dict[str, Any]) -> httpx.Response: ...

    def close(self) -> None: ...


class BrevoEmailClient:
    """Brevo (Sendinblue) transactional email API client."""

    def __init__(self, api_key: str, base_url: str, sandbox: bool = False, timeout: float = 10.0) -> None:
        self.sandbox = sandbox
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "api-key": api_key,
            },
            timeout=timeout,
        )

    def send_template_email(self, to_email: str, template_id: int, params: dict[str, Any]) -> httpx.Response:
        """Send a template email. The caller decides what a non-2xx response means."""
        body: dict[str, Any] = {
            "to": [{"email": to_email}],
            "templateId": template_id,
            "params": params,
            "headers": {},
        }
        if self.sandbox:
            logger.info("Sending email in sandbox mode")
            body["headers"] = {"X-Sib-Sandbox": "drop"}
        return self._client.post("/smtp/email", json=body)

    def close(self) -> None:
        self._client.close()


class ConsoleEmailClient:
    """Logs template emails instead of sending them."""

    def send_template_email(self, to_email: str, template_id: int, params: dict[str, Any]) -> httpx.Response:
        logger.info("Email (provider not configured): To=%s Template=%s", to_email, template_id)
        logger.debug("Email params: %s", params)
        return httpx.Response(201, json={"messageId": "console"})

    def close(self) -> None:
        pass


def build_email_client(settings: Settings) -> EmailClient:
    """Pick the email client for the configured environment."""
    if settings.BREVO_API_KEY:
        return BrevoEmailClient(settings.BREVO_API_KEY, settings.BREVO_URL, sandbox=settings.APP_ENV == "local")
    return ConsoleEmailClient()
