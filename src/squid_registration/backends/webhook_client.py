import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from squid_registration.errors import (
    NotificationConfigError,
    NotificationTransportError,
)

logger = logging.getLogger(__name__)


@dataclass
class WebhookResponse:
    status_code: int
    body: str
    message_id: Optional[str] = None


class DiscordWebhookClient:
    def __init__(
        self,
        webhook_url: Optional[str],
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), transport=transport
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    async def send(self, payload: dict) -> WebhookResponse:
        """
        POST a payload to the Discord webhook once.

        Args:
            payload: JSON-serializable webhook body

        Returns:
            WebhookResponse for a 2xx reply

        Raises:
            NotificationConfigError: If no webhook URL is configured
            NotificationTransportError: On transport errors or non-2xx replies
        """
        if not self.is_configured:
            raise NotificationConfigError("Discord webhook URL not configured")

        try:
            # wait=true makes Discord reply with the created message
            response = await self.client.post(
                self.webhook_url, json=payload, params={"wait": "true"}
            )
        except httpx.HTTPError as e:
            raise NotificationTransportError(
                f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
            ) from e

        if not response.is_success:
            raise NotificationTransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        return WebhookResponse(
            status_code=response.status_code,
            body=response.text,
            message_id=self._extract_message_id(response.text),
        )

    @staticmethod
    def _extract_message_id(body: str) -> Optional[str]:
        if not body:
            return None
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            return None
        if isinstance(data, dict) and data.get("id") is not None:
            return str(data["id"])
        return None

    async def aclose(self):
        await self.client.aclose()
