"""Tests for registration service functionality"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from squid_registration.errors import AuthorizationError, NotFoundError, PersistenceError
from squid_registration.models.registration import RegistrationRole, WebhookStatus
from squid_registration.models.webhook_log import DeliveryStatus
from squid_registration.routers.request_validator import parse_submission
from squid_registration.services.registration_service import RegistrationService


class TestRegistrationService:
    """Test registration service functionality"""

    def test_create_registration_starts_pending(self, registration_service):
        """New rows are pending and carry provenance"""
        registration = registration_service.create_registration(
            parse_submission(
                {"role": "player", "firstName": " Ana ", "lastName": "Lee", "class": "5A"}
            ),
            ip_address="203.0.113.7",
            user_agent="pytest",
        )

        assert registration.id is not None
        assert registration.role == RegistrationRole.PLAYER
        assert registration.first_name == "Ana"
        assert registration.player_class == "5A"
        assert registration.ip_address == "203.0.113.7"
        assert registration.user_agent == "pytest"
        assert registration.webhook_status == WebhookStatus.PENDING
        assert registration.timestamp is not None
        assert registration.discord_message_id is None

    def test_guard_submission_stores_guard_fields(self, registration_service):
        registration = registration_service.create_registration(
            parse_submission(
                {
                    "role": "guard",
                    "guardName": "Sam",
                    "guardClass": "6B",
                    "guardPhone": "555-1234",
                    "bringsPhone": "yes",
                    "willingToHelp": "no",
                    "firstName": "Ignored",
                }
            )
        )

        assert registration.role == RegistrationRole.GUARD
        assert registration.guard_name == "Sam"
        assert registration.guard_class == "6B"
        assert registration.guard_phone == "555-1234"
        assert registration.brings_phone == "yes"
        assert registration.willing_to_help == "no"
        # Player fields from a guard submission are not stored
        assert registration.first_name is None

    def test_ids_are_monotonic(self, registration_service):
        first = registration_service.create_registration(parse_submission({"role": "player"}))
        second = registration_service.create_registration(parse_submission({"role": "guard"}))

        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_submit_marks_sent_on_delivery(
        self, registration_service, webhook_log_service
    ):
        registration = await registration_service.submit(
            parse_submission(
                {"role": "player", "firstName": "Ana", "lastName": "Lee", "class": "5A"}
            ),
            ip_address="203.0.113.7",
            user_agent="pytest",
        )

        assert registration.webhook_status == WebhookStatus.SENT
        assert registration.discord_message_id == "900001"
        logs = webhook_log_service.get_logs_for_registration(registration.id)
        assert [log.status for log in logs] == [DeliveryStatus.SUCCESS]

    @pytest.mark.asyncio
    async def test_submit_marks_failed_when_delivery_fails(
        self, registration_service, webhook_log_service, webhook_endpoint
    ):
        webhook_endpoint.always(500)

        registration = await registration_service.submit(
            parse_submission({"role": "guard", "guardName": "Sam"})
        )

        assert registration.webhook_status == WebhookStatus.FAILED
        assert registration.discord_message_id is None
        logs = webhook_log_service.get_logs_for_registration(registration.id)
        assert len(logs) == 3
        assert all(log.status == DeliveryStatus.FAILED for log in logs)

    @pytest.mark.asyncio
    async def test_submit_without_notifier_raises(self, _db_session):
        service = RegistrationService(_db_session)

        with pytest.raises(RuntimeError):
            await service.submit(parse_submission({"role": "player"}))

    def test_status_leaves_pending_only_once(self, registration_service):
        registration = registration_service.create_registration(
            parse_submission({"role": "player"})
        )
        registration_service.update_webhook_status(registration, WebhookStatus.SENT)

        with pytest.raises(ValueError, match="already has webhook status sent"):
            registration_service.update_webhook_status(registration, WebhookStatus.FAILED)

    def test_status_cannot_be_set_back_to_pending(self, registration_service):
        registration = registration_service.create_registration(
            parse_submission({"role": "player"})
        )

        with pytest.raises(ValueError, match="back to pending"):
            registration_service.update_webhook_status(registration, WebhookStatus.PENDING)

    def test_get_registration(self, registration_service):
        registration = registration_service.create_registration(
            parse_submission({"role": "guard", "guardName": "Sam"})
        )

        found = registration_service.get_registration(registration.id)

        assert found.id == registration.id
        assert found.guard_name == "Sam"

    def test_get_registration_is_side_effect_free(self, registration_service):
        registration = registration_service.create_registration(
            parse_submission({"role": "player", "firstName": "Ana"})
        )

        first = registration_service.get_registration(registration.id).model_dump()
        second = registration_service.get_registration(registration.id).model_dump()

        assert first == second

    def test_get_missing_registration(self, registration_service):
        assert registration_service.get_registration_by_id(424242) is None
        with pytest.raises(NotFoundError):
            registration_service.get_registration(424242)

    def test_list_registrations_requires_admin(self, registration_service):
        with pytest.raises(AuthorizationError):
            registration_service.list_registrations(caller_is_admin=False)

    def test_list_registrations_newest_first(self, registration_service):
        created = [
            registration_service.create_registration(parse_submission({"role": "player"}))
            for _ in range(3)
        ]

        listed = registration_service.list_registrations(caller_is_admin=True)

        assert [r.id for r in listed] == [r.id for r in reversed(created)]

    def test_count_recent_registrations(self, registration_service):
        for ip in ("10.0.0.1", "10.0.0.1", "10.0.0.2"):
            registration_service.create_registration(
                parse_submission({"role": "player"}), ip_address=ip
            )

        hour_ago = datetime.now(timezone.utc) - timedelta(hours=1)
        in_future = datetime.now(timezone.utc) + timedelta(hours=1)

        assert registration_service.count_recent_registrations("10.0.0.1", hour_ago) == 2
        assert registration_service.count_recent_registrations("10.0.0.2", hour_ago) == 1
        assert registration_service.count_recent_registrations("10.0.0.1", in_future) == 0

    def test_insert_failure_raises_persistence_error(
        self, registration_service, monkeypatch
    ):
        def failing_commit():
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(registration_service.db, "commit", failing_commit)

        with pytest.raises(PersistenceError):
            registration_service.create_registration(parse_submission({"role": "player"}))
