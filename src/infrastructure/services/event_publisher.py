"""Event Publisher Infrastructure Service.

Concrete implementation of the domain event publishing interface, letting the
confirmation engine publish events without coupling to a message bus.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

import structlog

from src.domain.events.base import BaseDomainEvent
from src.domain.interfaces import IEventPublisher

logger = structlog.get_logger(__name__)

Subscriber = Callable[[BaseDomainEvent], Awaitable[None]]


class InMemoryEventPublisher(IEventPublisher):
    """In-memory event publisher for development and testing.

    Stores every event for inspection and forwards it to async subscribers
    (audit log writers, security monitors). In production this is replaced
    by a bus-backed implementation of the same interface.
    """

    def __init__(self):
        self._published_events: List[BaseDomainEvent] = []
        self._subscribers: List[Subscriber] = []

    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a single domain event.

        Subscriber failures are logged and never propagate to the publisher.
        """
        self._published_events.append(event)

        if self._subscribers:
            results = await asyncio.gather(
                *(subscriber(event) for subscriber in self._subscribers),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, Exception):
                    logger.error(
                        "Event subscriber failed",
                        event_type=type(event).__name__,
                        error=str(result),
                    )

        logger.info(
            "Domain event published",
            event_type=type(event).__name__,
            user_id=event.user_id,
            correlation_id=event.correlation_id,
            occurred_at=event.occurred_at.isoformat(),
        )

    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    def add_subscriber(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def get_published_events(
        self,
        event_type: Optional[type] = None,
        user_id: Optional[str] = None,
    ) -> List[BaseDomainEvent]:
        """Get published events with optional filtering.

        Args:
            event_type: Filter by event class
            user_id: Filter by user ID

        Returns:
            List[BaseDomainEvent]: Filtered list of published events
        """
        events = self._published_events
        if event_type is not None:
            events = [e for e in events if isinstance(e, event_type)]
        if user_id is not None:
            events = [e for e in events if e.user_id == user_id]
        return list(events)

    def clear_published_events(self) -> None:
        self._published_events.clear()
