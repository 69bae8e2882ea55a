"""Confirmation store interface.

The store is a thin boundary over the external user datastore. It owns
`UserEmailState` records and guarantees that concurrent writers for one user
cannot interleave.
"""

from abc import ABC, abstractmethod

from src.domain.entities.user_email_state import UserEmailState


class IConfirmationStore(ABC):
    """Interface for persisting per-user confirmation state.

    Concurrency contract:
    - ``save`` is a compare-and-swap on ``UserEmailState.version``. A state
      loaded before another writer saved is rejected with
      ``ConcurrentModificationError``; nothing is written.
    - Returned states are copies; mutating them has no effect until saved.
    """

    @abstractmethod
    async def create(self, state: UserEmailState) -> UserEmailState:
        """Create the state alongside a new user record.

        Returns:
            UserEmailState: The stored copy (version 1)

        Raises:
            DuplicateStateError: If state already exists for ``state.user_id``
        """
        pass

    @abstractmethod
    async def load(self, user_id: str) -> UserEmailState:
        """Load the state for ``user_id``.

        Raises:
            UserNotFoundError: If no state exists for ``user_id``
        """
        pass

    @abstractmethod
    async def save(self, state: UserEmailState) -> UserEmailState:
        """Persist ``state`` if its version is still current.

        Returns:
            UserEmailState: The stored copy with its new version

        Raises:
            UserNotFoundError: If no state exists for ``state.user_id``
            ConcurrentModificationError: If another writer saved first
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Destroy the state together with the user record.

        Raises:
            UserNotFoundError: If no state exists for ``user_id``
        """
        pass
