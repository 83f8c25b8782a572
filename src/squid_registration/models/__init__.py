"""Database models for the registration server"""

from squid_registration.models.registration import (
    Registration,
    RegistrationRole,
    WebhookStatus,
)
from squid_registration.models.webhook_log import DeliveryStatus, WebhookLog

__all__ = [
    "Registration",
    "RegistrationRole",
    "WebhookStatus",
    "WebhookLog",
    "DeliveryStatus",
]
