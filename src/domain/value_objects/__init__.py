"""Domain Value Objects for the email confirmation domain.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .confirmation_token import ConfirmationToken
from .notification_kind import NotificationKind

__all__ = [
    "ConfirmationToken",
    "NotificationKind",
]
