"""Notification dispatcher interface.

The dispatcher is an external collaborator: the engine tells it which kind of
message to send and to whom, and template selection, rendering and transport
live behind it.
"""

from abc import ABC, abstractmethod

from src.domain.value_objects.confirmation_token import ConfirmationToken
from src.domain.value_objects.notification_kind import NotificationKind


class INotificationDispatcher(ABC):
    """Interface for sending confirmation messages."""

    @abstractmethod
    async def send(
        self,
        user_id: str,
        kind: NotificationKind,
        recipient: str,
        token: ConfirmationToken,
        language: str = "en",
    ) -> None:
        """Send a confirmation message.

        Args:
            user_id: User the message belongs to
            kind: Which message to send
            recipient: Address that must prove control by following the link
            token: Token to embed in the confirmation link
            language: Language code for the message content

        Raises:
            DispatchFailureError: If the message could not be handed over.
                Not retried; retry policy belongs to the caller.
        """
        pass
