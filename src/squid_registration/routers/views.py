"""JSON views of stored rows, using the public camelCase field names"""

from datetime import datetime, timezone
from typing import Optional

from squid_registration.models.registration import Registration
from squid_registration.models.webhook_log import WebhookLog


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def registration_summary(registration: Registration) -> dict:
    """Reduced view returned to registrants"""
    return {
        "id": registration.id,
        "role": registration.role.value,
        "timestamp": isoformat(registration.timestamp),
        "webhookStatus": registration.webhook_status.value,
    }


def registration_to_dict(registration: Registration) -> dict:
    """Full row, for admins"""
    return {
        "id": registration.id,
        "role": registration.role.value,
        "firstName": registration.first_name,
        "lastName": registration.last_name,
        "class": registration.player_class,
        "phone": registration.phone,
        "bringsPhone": registration.brings_phone,
        "willingToHelp": registration.willing_to_help,
        "guardName": registration.guard_name,
        "guardClass": registration.guard_class,
        "guardPhone": registration.guard_phone,
        "ipAddress": registration.ip_address,
        "userAgent": registration.user_agent,
        "timestamp": isoformat(registration.timestamp),
        "webhookStatus": registration.webhook_status.value,
        "discordMessageId": registration.discord_message_id,
    }


def webhook_log_to_dict(entry: WebhookLog) -> dict:
    return {
        "id": entry.id,
        "registrationId": entry.registration_id,
        "attempt": entry.attempt,
        "status": entry.status.value,
        "response": entry.response,
        "timestamp": isoformat(entry.timestamp),
    }
