"""In-memory confirmation store.

Reference implementation of the store contract, used by tests and by hosts
that keep user records in process.
"""

import asyncio
from typing import Dict

from structlog import get_logger

from src.core.exceptions import (
    ConcurrentModificationError,
    DuplicateStateError,
    UserNotFoundError,
)
from src.domain.entities.user_email_state import UserEmailState
from src.domain.interfaces import IConfirmationStore
from src.utils.i18n import get_translated_message

logger = get_logger(__name__)


class InMemoryConfirmationStore(IConfirmationStore):
    """Dictionary-backed store with version compare-and-swap.

    States are copied on the way in and out, so callers never share an
    instance with the store. A single ``asyncio.Lock`` serialises the
    compare-and-swap step.
    """

    def __init__(self):
        self._states: Dict[str, UserEmailState] = {}
        self._lock = asyncio.Lock()

    async def create(self, state: UserEmailState) -> UserEmailState:
        async with self._lock:
            if state.user_id in self._states:
                raise DuplicateStateError(
                    f"Confirmation state already exists for user {state.user_id}"
                )
            stored = state.copy()
            stored.version = 1
            self._states[state.user_id] = stored
            logger.debug("Confirmation state created", user_id=state.user_id)
            return stored.copy()

    async def load(self, user_id: str) -> UserEmailState:
        state = self._states.get(user_id)
        if state is None:
            raise UserNotFoundError(get_translated_message("confirmation_state_not_found", "en"))
        return state.copy()

    async def save(self, state: UserEmailState) -> UserEmailState:
        async with self._lock:
            current = self._states.get(state.user_id)
            if current is None:
                raise UserNotFoundError(get_translated_message("confirmation_state_not_found", "en"))
            if current.version != state.version:
                logger.warning(
                    "Stale confirmation state rejected",
                    user_id=state.user_id,
                    expected_version=state.version,
                    stored_version=current.version,
                )
                raise ConcurrentModificationError(
                    f"Confirmation state for user {state.user_id} was modified concurrently"
                )
            stored = state.copy()
            stored.version = current.version + 1
            self._states[state.user_id] = stored
            state.version = stored.version
            return stored.copy()

    async def delete(self, user_id: str) -> None:
        async with self._lock:
            if self._states.pop(user_id, None) is None:
                raise UserNotFoundError(get_translated_message("confirmation_state_not_found", "en"))
