"""Database handle with an explicit open/close lifecycle"""

import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

# Imported so their tables are registered on SQLModel.metadata
from squid_registration.models.registration import Registration  # noqa: F401
from squid_registration.models.webhook_log import WebhookLog  # noqa: F401

logger = logging.getLogger(__name__)


class Database:
    """Owns the SQLAlchemy engine for the lifetime of the app"""

    def __init__(self, database_url: str, echo: bool = False):
        if not database_url:
            raise ValueError(
                "DATABASE_URL is not set. Set it in the environment or a local .env file."
            )

        engine_kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            # Sessions are used from the event loop and from TestClient threads
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool

        self.url = database_url
        self.engine = create_engine(database_url, **engine_kwargs)

    def create_tables(self):
        """Create any missing tables"""
        SQLModel.metadata.create_all(self.engine)
        logger.info("Registrations and webhook_logs tables ready")

    def session(self) -> Session:
        return Session(self.engine)

    def ping(self) -> bool:
        """Run a trivial query to confirm the store is reachable"""
        with self.engine.connect() as connection:
            return connection.execute(text("SELECT 1")).scalar() == 1

    def close(self):
        self.engine.dispose()
        logger.info("Database connections closed")


def get_db(request: Request):
    """Get database session"""
    with request.app.state.database.session() as session:
        yield session
