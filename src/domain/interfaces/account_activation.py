"""Optional account activation capability."""

from abc import ABC, abstractmethod


class IAccountActivator(ABC):
    """Activates a newly created account on its first successful confirmation.

    Supplied by the host service for users that start out unactivated.
    Users that only need address confirmation run without one.
    """

    @abstractmethod
    async def is_activated(self, user_id: str) -> bool:
        pass

    @abstractmethod
    async def activate(self, user_id: str) -> None:
        pass
