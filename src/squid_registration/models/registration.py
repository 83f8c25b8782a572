"""SQLModel Registration model"""

import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel


class RegistrationRole(str, enum.Enum):
    PLAYER = "player"
    GUARD = "guard"


class WebhookStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class Registration(SQLModel, table=True):
    """A single event registration and its notification status"""

    __tablename__ = "registrations"

    id: Optional[int] = Field(default=None, primary_key=True)
    role: RegistrationRole = Field(
        sa_column=Column(
            SAEnum(
                RegistrationRole,
                name="registration_role",
                values_callable=lambda enum: [e.value for e in enum],
            ),
            nullable=False,
        )
    )

    # Player fields
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    player_class: Optional[str] = None
    phone: Optional[str] = None

    # Guard fields
    guard_name: Optional[str] = None
    guard_class: Optional[str] = None
    guard_phone: Optional[str] = None
    brings_phone: Optional[str] = None  # "yes" or "no"
    willing_to_help: Optional[str] = None  # "yes" or "no"

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
    webhook_status: WebhookStatus = Field(
        default=WebhookStatus.PENDING,
        sa_column=Column(
            SAEnum(
                WebhookStatus,
                name="webhook_status",
                values_callable=lambda enum: [e.value for e in enum],
            ),
            nullable=False,
            server_default=WebhookStatus.PENDING.value,
        ),
    )
    discord_message_id: Optional[str] = None
