"""Registration service for handling event sign-ups"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from squid_registration.errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
)
from squid_registration.models.database import get_db
from squid_registration.models.registration import Registration, WebhookStatus
from squid_registration.models.submission import (
    GuardSubmission,
    PlayerSubmission,
    Submission,
)
from squid_registration.services.notifier import WebhookNotifier, get_notifier

logger = logging.getLogger(__name__)


class RegistrationService:
    """Service for managing registrations and their notification status"""

    def __init__(self, db_session: Session, notifier: Optional[WebhookNotifier] = None):
        self.db = db_session
        self.notifier = notifier

    def create_registration(
        self,
        submission: Submission,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Registration:
        """
        Insert a registration with webhook_status pending.

        Args:
            submission: Validated player or guard submission
            ip_address: Client address the request came from
            user_agent: Client User-Agent header

        Returns:
            Registration: The stored registration

        Raises:
            PersistenceError: If the insert fails
        """
        registration = Registration(
            role=submission.role,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        if isinstance(submission, PlayerSubmission):
            registration.first_name = submission.first_name
            registration.last_name = submission.last_name
            registration.player_class = submission.player_class
            registration.phone = submission.phone
        elif isinstance(submission, GuardSubmission):
            registration.guard_name = submission.guard_name
            registration.guard_class = submission.guard_class
            registration.guard_phone = submission.guard_phone
            registration.brings_phone = submission.brings_phone
            registration.willing_to_help = submission.willing_to_help

        try:
            self.db.add(registration)
            self.db.commit()
            self.db.refresh(registration)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating registration: {e}")
            raise PersistenceError("Failed to store registration") from e

        logger.info(f"Created {registration.role.value} registration {registration.id}")
        return registration

    def update_webhook_status(
        self,
        registration: Registration,
        status: WebhookStatus,
        message_id: Optional[str] = None,
    ) -> Registration:
        """
        Move a registration out of pending. Allowed exactly once.

        Raises:
            ValueError: If the registration already left pending or the
                target status is pending
            PersistenceError: If the update fails
        """
        if status == WebhookStatus.PENDING:
            raise ValueError("Cannot move a registration back to pending")
        if registration.webhook_status != WebhookStatus.PENDING:
            raise ValueError(
                f"Registration {registration.id} already has webhook status "
                f"{registration.webhook_status.value}"
            )

        registration.webhook_status = status
        if message_id:
            registration.discord_message_id = message_id

        try:
            self.db.add(registration)
            self.db.commit()
            self.db.refresh(registration)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating webhook status for {registration.id}: {e}")
            raise PersistenceError("Failed to update webhook status") from e

        return registration

    async def submit(
        self,
        submission: Submission,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Registration:
        """
        Store a registration, notify the webhook and record the outcome.

        A failed notification does not fail the submission; it is reflected
        in webhook_status and the delivery log.

        Raises:
            PersistenceError: If the registration cannot be stored
        """
        if self.notifier is None:
            raise RuntimeError("RegistrationService.submit requires a notifier")

        registration = self.create_registration(submission, ip_address, user_agent)

        result = await self.notifier.deliver(registration)
        status = WebhookStatus.SENT if result.success else WebhookStatus.FAILED
        registration = self.update_webhook_status(
            registration, status, message_id=result.message_id
        )

        logger.info(
            f"Registration {registration.id} webhook {status.value} "
            f"after {result.attempts} attempt(s)"
        )
        return registration

    def get_registration_by_id(self, registration_id: int) -> Optional[Registration]:
        """Get a registration by ID"""
        return self.db.get(Registration, registration_id)

    def get_registration(self, registration_id: int) -> Registration:
        """
        Get a registration by ID.

        Raises:
            NotFoundError: If no registration has this ID
        """
        registration = self.get_registration_by_id(registration_id)
        if registration is None:
            raise NotFoundError(f"Registration {registration_id} not found")
        return registration

    def list_registrations(self, caller_is_admin: bool) -> list[Registration]:
        """
        Get every registration, newest first.

        Raises:
            AuthorizationError: If the caller is not an admin
        """
        if not caller_is_admin:
            raise AuthorizationError("Unauthorized")

        stmt = select(Registration).order_by(
            Registration.timestamp.desc(), Registration.id.desc()
        )
        return list(self.db.exec(stmt).all())

    def count_recent_registrations(self, ip_address: str, since: datetime) -> int:
        """Count registrations stored from an IP address since a point in time"""
        stmt = select(func.count(Registration.id)).where(
            Registration.ip_address == ip_address,
            Registration.timestamp >= since,
        )
        return self.db.exec(stmt).one()


def get_registration_service(
    db: Session = Depends(get_db),
    notifier: WebhookNotifier = Depends(get_notifier),
) -> RegistrationService:
    return RegistrationService(db, notifier)
