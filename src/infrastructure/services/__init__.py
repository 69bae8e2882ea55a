"""Infrastructure Services.

Concrete implementations of the domain collaborator interfaces.

Service Categories:
- Tokens: CSPRNG-backed confirmation token generation
- Notification: SMTP and logging dispatchers for confirmation messages
- Events: Domain event publishing
"""

from .event_publisher import InMemoryEventPublisher
from .notification import LoggingNotificationDispatcher, SmtpNotificationDispatcher
from .token_generator import SecureTokenGenerator

__all__ = [
    "SecureTokenGenerator",
    "LoggingNotificationDispatcher",
    "SmtpNotificationDispatcher",
    "InMemoryEventPublisher",
]
