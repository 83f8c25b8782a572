"""Delivery log service - append-only record of webhook attempts"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from squid_registration.errors import PersistenceError
from squid_registration.models.webhook_log import DeliveryStatus, WebhookLog

logger = logging.getLogger(__name__)


class WebhookLogService:
    """Service for writing and reading webhook delivery attempts"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def record_attempt(
        self,
        registration_id: int,
        attempt: int,
        status: DeliveryStatus,
        response: Optional[str],
    ) -> WebhookLog:
        """
        Persist one delivery attempt.

        The row is committed before returning so it is durable before any
        further attempt is made.

        Raises:
            PersistenceError: If the row cannot be written
        """
        entry = WebhookLog(
            registration_id=registration_id,
            attempt=attempt,
            status=status,
            response=response,
        )
        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Error logging webhook attempt {attempt} for registration {registration_id}: {e}"
            )
            raise PersistenceError("Failed to record webhook attempt") from e

        return entry

    def get_logs_for_registration(self, registration_id: int) -> list[WebhookLog]:
        """Get all attempts for a registration, oldest first"""
        stmt = (
            select(WebhookLog)
            .where(WebhookLog.registration_id == registration_id)
            .order_by(WebhookLog.attempt, WebhookLog.id)
        )
        return list(self.db.exec(stmt).all())
