"""SQLModel WebhookLog model - audit trail of webhook delivery attempts"""

import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Text
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel


class DeliveryStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"


class WebhookLog(SQLModel, table=True):
    """One row per webhook delivery attempt"""

    __tablename__ = "webhook_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    registration_id: int = Field(foreign_key="registrations.id", index=True)
    attempt: int  # 1-based
    status: DeliveryStatus = Field(
        sa_column=Column(
            SAEnum(
                DeliveryStatus,
                name="delivery_status",
                values_callable=lambda enum: [e.value for e in enum],
            ),
            nullable=False,
        )
    )
    # Response body on success, error description on failure
    response: Optional[str] = Field(default=None, sa_column=Column(Text))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
