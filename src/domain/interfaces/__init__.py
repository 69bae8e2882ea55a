"""Domain Interfaces for dependency inversion.

These interfaces define contracts that infrastructure and host services must
implement, keeping the confirmation engine free of storage and transport
details.

Interface Organization:
- Persistence: Confirmation state store
- Security: Token generation
- Collaborators: Notification dispatch, account activation
- Infrastructure: Event publishing
"""

from .account_activation import IAccountActivator
from .confirmation_store import IConfirmationStore
from .infrastructure import IEventPublisher
from .notification import INotificationDispatcher
from .token_generator import ITokenGenerator

__all__ = [
    "IConfirmationStore",
    "ITokenGenerator",
    "INotificationDispatcher",
    "IAccountActivator",
    "IEventPublisher",
]
