"""Domain Events.

All events are immutable and represent significant business occurrences in
the email change confirmation workflow.
"""

from .base import BaseDomainEvent
from .email_change_events import (
    ConfirmationNotificationSentEvent,
    EmailChangeCancelledEvent,
    EmailChangeConfirmedEvent,
    EmailChangeRequestedEvent,
    EmailConfirmationFailedEvent,
)

__all__ = [
    "BaseDomainEvent",
    "EmailChangeRequestedEvent",
    "EmailChangeConfirmedEvent",
    "EmailChangeCancelledEvent",
    "EmailConfirmationFailedEvent",
    "ConfirmationNotificationSentEvent",
]
