"""Dependency wiring for the confirmation engine.

Factories that assemble the engine from settings and infrastructure
implementations, so host services only choose the store.

The wiring follows clean architecture by:
1. Depending on domain interfaces, not concrete classes
2. Building one collaborator per factory
3. Switching implementations by environment (test mode vs SMTP)
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import settings
from src.domain.interfaces import (
    IAccountActivator,
    IConfirmationStore,
    IEventPublisher,
    INotificationDispatcher,
    ITokenGenerator,
)
from src.domain.services.email_confirmation import ConfirmationEngine, ConfirmationEngineConfig
from src.infrastructure.repositories import InMemoryConfirmationStore, SqlConfirmationStore
from src.infrastructure.services.event_publisher import InMemoryEventPublisher
from src.infrastructure.services.notification import SmtpNotificationDispatcher
from src.infrastructure.services.token_generator import SecureTokenGenerator


def get_confirmation_store(db_session: Optional[AsyncSession] = None) -> IConfirmationStore:
    """SQL store when a session is given, in-memory store otherwise."""
    if db_session is not None:
        return SqlConfirmationStore(db_session)
    return InMemoryConfirmationStore()


def get_token_generator() -> ITokenGenerator:
    return SecureTokenGenerator()


def get_notification_dispatcher() -> INotificationDispatcher:
    return SmtpNotificationDispatcher(settings)


def get_event_publisher() -> IEventPublisher:
    return InMemoryEventPublisher()


def get_confirmation_engine(
    store: IConfirmationStore,
    dispatcher: Optional[INotificationDispatcher] = None,
    activator: Optional[IAccountActivator] = None,
    event_publisher: Optional[IEventPublisher] = None,
    token_generator: Optional[ITokenGenerator] = None,
) -> ConfirmationEngine:
    """Assemble a confirmation engine configured from settings.

    Args:
        store: Where confirmation state lives
        dispatcher: Message dispatcher; SMTP (or its test mode) by default
        activator: Optional account activation hook
        event_publisher: Event publisher; in-memory by default
        token_generator: Token source; ``SecureTokenGenerator`` by default

    Returns:
        ConfirmationEngine: Ready-to-use engine
    """
    return ConfirmationEngine(
        store=store,
        token_generator=token_generator or get_token_generator(),
        dispatcher=dispatcher or get_notification_dispatcher(),
        config=ConfirmationEngineConfig.from_settings(settings),
        activator=activator,
        event_publisher=event_publisher or get_event_publisher(),
    )
