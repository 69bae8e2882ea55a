import os

os.environ.setdefault("APP_ENV", "test")

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from src.core.logging import configure_logging
from src.domain.interfaces import IAccountActivator
from src.domain.services.email_confirmation import ConfirmationEngine, ConfirmationEngineConfig
from src.infrastructure.database.async_db import (
    create_async_db_and_tables,
    create_engine_from_settings,
    create_session_factory,
)
from src.infrastructure.repositories import InMemoryConfirmationStore
from src.infrastructure.services.event_publisher import InMemoryEventPublisher
from src.infrastructure.services.notification import LoggingNotificationDispatcher
from src.infrastructure.services.token_generator import SecureTokenGenerator


class FakeActivator(IAccountActivator):
    """Account activation hook that records activations."""

    def __init__(self, activated=()):
        self.activated = set(activated)
        self.calls = []

    async def is_activated(self, user_id: str) -> bool:
        return user_id in self.activated

    async def activate(self, user_id: str) -> None:
        self.calls.append(user_id)
        self.activated.add(user_id)


@pytest.fixture
def store():
    return InMemoryConfirmationStore()


@pytest.fixture
def token_generator():
    return SecureTokenGenerator()


@pytest.fixture
def dispatcher():
    return LoggingNotificationDispatcher()


@pytest.fixture
def event_publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def activator():
    return FakeActivator()


@pytest.fixture
def engine(store, token_generator, dispatcher, event_publisher):
    return ConfirmationEngine(
        store=store,
        token_generator=token_generator,
        dispatcher=dispatcher,
        config=ConfirmationEngineConfig(),
        event_publisher=event_publisher,
    )


@pytest_asyncio.fixture
async def sqlite_engine():
    """In-memory SQLite engine shared by every session of one test."""
    db_engine = create_engine_from_settings(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    await create_async_db_and_tables(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return create_session_factory(sqlite_engine)


@pytest.fixture(scope="session", autouse=True)
def structured_logging():
    configure_logging(log_level="DEBUG", json_logs=False)
