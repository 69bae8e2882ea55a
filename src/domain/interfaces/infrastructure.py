"""Infrastructure service interfaces for cross-cutting concerns.

Event Publisher: domain event publishing and distribution.
"""

from abc import ABC, abstractmethod
from typing import List

from src.domain.events.base import BaseDomainEvent


class IEventPublisher(ABC):
    """Interface for domain event publishing and distribution.

    Decouples the engine, which raises events, from listeners such as audit
    logs or security monitoring.
    """

    @abstractmethod
    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a single domain event.

        Args:
            event: Domain event to publish
        """
        pass

    @abstractmethod
    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        """Publish multiple domain events.

        Args:
            events: List of domain events to publish
        """
        pass
