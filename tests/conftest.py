"""Shared test configuration and fixtures for registration server tests"""

import json
import logging

import httpx
import pytest
from fastapi import Depends, Request
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from squid_registration.backends.webhook_client import DiscordWebhookClient
from squid_registration.main import create_app
from squid_registration.models.database import Database, get_db
from squid_registration.models.registration import Registration
from squid_registration.models.webhook_log import WebhookLog
from squid_registration.services.notifier import WebhookNotifier, get_notifier
from squid_registration.services.registration_service import RegistrationService
from squid_registration.services.webhook_log_service import WebhookLogService
from tests.config import test_config

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class WebhookEndpoint:
    """Scripted stand-in for the Discord webhook, served via httpx.MockTransport.

    Each request consumes the next scripted outcome; once the script is
    exhausted every request gets `default`. An outcome is an HTTP status
    code or "connect_error" to simulate a transport failure.
    """

    def __init__(self):
        self.script = []
        self.default = 200
        self.requests: list[httpx.Request] = []
        self._next_message_id = 900001

    def respond_with(self, *outcomes):
        self.script.extend(outcomes)

    def always(self, outcome):
        self.script.clear()
        self.default = outcome

    def payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.script.pop(0) if self.script else self.default

        if outcome == "connect_error":
            raise httpx.ConnectError("Connection refused", request=request)
        if 200 <= outcome < 300:
            message_id = str(self._next_message_id)
            self._next_message_id += 1
            return httpx.Response(outcome, json={"id": message_id, "type": 0})
        return httpx.Response(outcome, json={"message": "webhook error"})


class RecordingSleep:
    """Async sleep replacement that records requested delays"""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float):
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def webhook_endpoint():
    return WebhookEndpoint()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_webhook_client(webhook_endpoint):
    """Build a webhook client wired to the scripted endpoint"""

    def _make(webhook_url=test_config["discord_webhook_url"]):
        return DiscordWebhookClient(
            webhook_url,
            timeout=1.0,
            transport=httpx.MockTransport(webhook_endpoint.handler),
        )

    return _make


@pytest.fixture
def webhook_client(make_webhook_client):
    return make_webhook_client()


@pytest.fixture
def database(tmp_path):
    """File-backed SQLite store, fresh for every test"""
    db = Database(f"sqlite:///{tmp_path / 'registrations.db'}")
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def _db_session(database):
    """Private DB session for fixtures only.

    Prefer the service fixtures (`registration_service`,
    `webhook_log_service`) in tests.
    """
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def webhook_log_service(_db_session):
    return WebhookLogService(_db_session)


@pytest.fixture
def notifier(webhook_log_service, webhook_client, recording_sleep):
    return WebhookNotifier(webhook_log_service, webhook_client, sleep=recording_sleep)


@pytest.fixture
def registration_service(_db_session, notifier):
    return RegistrationService(_db_session, notifier)


@pytest.fixture
def stored_rows(database):
    """Read registrations and webhook logs through a fresh session"""

    class _Rows:
        def registrations(self) -> list[Registration]:
            with database.session() as session:
                return list(session.exec(select(Registration)).all())

        def logs(self, registration_id: int) -> list[WebhookLog]:
            with database.session() as session:
                return WebhookLogService(session).get_logs_for_registration(
                    registration_id
                )

    return _Rows()


@pytest.fixture
def app_factory(database, make_webhook_client, recording_sleep):
    """Build an app on the test database with backoff sleeps recorded, not slept"""

    def _create(webhook_url=test_config["discord_webhook_url"], **overrides):
        app = create_app(
            app_config={**test_config, **overrides},
            database=database,
            webhook_client=make_webhook_client(webhook_url),
        )

        def notifier_without_backoff(request: Request, db: Session = Depends(get_db)):
            return WebhookNotifier(
                WebhookLogService(db),
                request.app.state.webhook_client,
                sleep=recording_sleep,
            )

        app.dependency_overrides[get_notifier] = notifier_without_backoff
        return app

    return _create


@pytest.fixture
def client(app_factory):
    with TestClient(app_factory()) as test_client:
        yield test_client
