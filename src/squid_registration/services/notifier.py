"""Webhook notifier - builds the Discord embed and delivers it with retries"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from fastapi import Depends, Request
from sqlmodel import Session

from squid_registration.backends.webhook_client import DiscordWebhookClient
from squid_registration.errors import (
    NotificationConfigError,
    NotificationTransportError,
    PersistenceError,
)
from squid_registration.models.database import get_db
from squid_registration.models.registration import Registration, RegistrationRole
from squid_registration.models.webhook_log import DeliveryStatus
from squid_registration.services.webhook_log_service import WebhookLogService

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
PLAYER_COLOR = 0x00FF00
GUARD_COLOR = 0xFF0000
USER_AGENT_LIMIT = 100
NOT_AVAILABLE = "N/A"


@dataclass
class DeliveryResult:
    success: bool
    attempts: int
    message_id: Optional[str] = None


def backoff_seconds(attempt: int) -> int:
    """Wait after a failed attempt: 2s after the first, 4s after the second"""
    return 2**attempt


def _field(name: str, value: Optional[str], inline: bool = True) -> dict:
    return {"name": name, "value": value or NOT_AVAILABLE, "inline": inline}


def build_payload(
    registration: Registration, issued_at: Optional[datetime] = None
) -> dict:
    """
    Build the Discord webhook body for a registration.

    Args:
        registration: Stored registration (must have an id)
        issued_at: Embed timestamp, defaults to now

    Returns:
        Dict with a single embed
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    user_agent = (registration.user_agent or "")[:USER_AGENT_LIMIT]

    if registration.role == RegistrationRole.PLAYER:
        full_name = " ".join(
            part for part in (registration.first_name, registration.last_name) if part
        )
        color = PLAYER_COLOR
        fields = [
            _field("Role", "Player"),
            _field("Name", full_name),
            _field("Class", registration.player_class),
            _field("IP Address", registration.ip_address),
            _field("User Agent", user_agent, inline=False),
        ]
    else:
        color = GUARD_COLOR
        fields = [
            _field("Role", "Guard"),
            _field("Name", registration.guard_name),
            _field("Class", registration.guard_class),
            _field("Phone", registration.guard_phone),
            _field("Brings Phone", registration.brings_phone),
            _field("Willing to Help", registration.willing_to_help),
            _field("IP Address", registration.ip_address),
            _field("User Agent", user_agent, inline=False),
        ]

    embed = {
        "title": "New Registration",
        "color": color,
        "fields": fields,
        "timestamp": issued_at.isoformat(),
        "footer": {"text": f"ID: {registration.id}"},
    }
    return {"embeds": [embed]}


class WebhookNotifier:
    """Delivers registration notifications, logging every attempt"""

    def __init__(
        self,
        log_service: WebhookLogService,
        webhook_client: DiscordWebhookClient,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.log_service = log_service
        self.webhook_client = webhook_client
        self._sleep = sleep

    def _record(
        self,
        registration: Registration,
        attempt: int,
        status: DeliveryStatus,
        response: Optional[str],
    ):
        # A lost audit row must not stop the retries or the status update
        try:
            self.log_service.record_attempt(registration.id, attempt, status, response)
        except PersistenceError as e:
            logger.error(
                f"Webhook attempt {attempt} for registration {registration.id} "
                f"was not logged: {e}"
            )

    async def deliver(self, registration: Registration) -> DeliveryResult:
        """
        Send the notification for a registration, retrying up to MAX_ATTEMPTS.

        Never raises for delivery problems: a missing webhook URL or repeated
        failures are reported through the returned result.
        """
        payload = build_payload(registration)

        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                response = await self.webhook_client.send(payload)
            except NotificationConfigError as e:
                logger.error(f"Skipping webhook for registration {registration.id}: {e}")
                return DeliveryResult(success=False, attempts=0)
            except NotificationTransportError as e:
                logger.warning(
                    f"Webhook attempt {attempt} for registration {registration.id} failed: {e}"
                )
                self._record(registration, attempt, DeliveryStatus.FAILED, str(e))
                if attempt < MAX_ATTEMPTS:
                    await self._sleep(backoff_seconds(attempt))
                continue

            self._record(registration, attempt, DeliveryStatus.SUCCESS, response.body)
            logger.info(
                f"Webhook sent for registration {registration.id} on attempt {attempt}"
            )
            return DeliveryResult(
                success=True, attempts=attempt, message_id=response.message_id
            )

        logger.error(f"All webhook attempts failed for registration {registration.id}")
        return DeliveryResult(success=False, attempts=MAX_ATTEMPTS)


def get_notifier(request: Request, db: Session = Depends(get_db)) -> WebhookNotifier:
    """Build a notifier bound to the request's database session"""
    return WebhookNotifier(WebhookLogService(db), request.app.state.webhook_client)
