"""Email Change Confirmation Domain Events.

These events represent significant business occurrences in the email change
workflow that other parts of the system may need to react to (audit logging,
monitoring, fraud detection). Addresses are carried masked.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from src.domain.value_objects.notification_kind import NotificationKind

from .base import BaseDomainEvent


@dataclass(frozen=True)
class EmailChangeRequestedEvent(BaseDomainEvent):
    """Published when a new pending address and token were stored.

    Attributes:
        pending_email: Masked pending address
        token_prefix: First characters of the issued token
    """

    pending_email: str
    token_prefix: str

    @classmethod
    def create(
        cls,
        user_id: str,
        pending_email: str,
        token_prefix: str,
        correlation_id: Optional[str] = None,
    ) -> 'EmailChangeRequestedEvent':
        return cls(
            occurred_at=datetime.now(timezone.utc),
            user_id=user_id,
            correlation_id=correlation_id,
            pending_email=pending_email,
            token_prefix=token_prefix,
        )


@dataclass(frozen=True)
class EmailChangeConfirmedEvent(BaseDomainEvent):
    """Published after a successful confirmation.

    Attributes:
        email_committed: Whether the current address changed
        previous_email: Masked address before the commit
        current_email: Masked address after the commit
        activated: Whether the account activation hook ran
    """

    email_committed: bool
    previous_email: str
    current_email: str
    activated: bool = False

    @classmethod
    def create(
        cls,
        user_id: str,
        email_committed: bool,
        previous_email: str,
        current_email: str,
        activated: bool = False,
        correlation_id: Optional[str] = None,
    ) -> 'EmailChangeConfirmedEvent':
        return cls(
            occurred_at=datetime.now(timezone.utc),
            user_id=user_id,
            correlation_id=correlation_id,
            email_committed=email_committed,
            previous_email=previous_email,
            current_email=current_email,
            activated=activated,
        )


@dataclass(frozen=True)
class EmailChangeCancelledEvent(BaseDomainEvent):
    """Published when a pending change was discarded.

    Attributes:
        pending_email: Masked address that was pending
    """

    pending_email: str

    @classmethod
    def create(
        cls,
        user_id: str,
        pending_email: str,
        correlation_id: Optional[str] = None,
    ) -> 'EmailChangeCancelledEvent':
        return cls(
            occurred_at=datetime.now(timezone.utc),
            user_id=user_id,
            correlation_id=correlation_id,
            pending_email=pending_email,
        )


@dataclass(frozen=True)
class EmailConfirmationFailedEvent(BaseDomainEvent):
    """Published when a confirmation attempt is rejected.

    This event can feed security monitoring: repeated failures for the same
    user suggest token guessing.

    Attributes:
        failure_reason: Machine-readable error code (token_mismatch, token_expired)
        token_prefix: First characters of the presented token, if any
    """

    failure_reason: str
    token_prefix: Optional[str] = None

    @classmethod
    def create(
        cls,
        user_id: str,
        failure_reason: str,
        token_prefix: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> 'EmailConfirmationFailedEvent':
        return cls(
            occurred_at=datetime.now(timezone.utc),
            user_id=user_id,
            correlation_id=correlation_id,
            failure_reason=failure_reason,
            token_prefix=token_prefix,
        )


@dataclass(frozen=True)
class ConfirmationNotificationSentEvent(BaseDomainEvent):
    """Published after the dispatcher accepted a confirmation message.

    Attributes:
        kind: Which message was sent
        recipient: Masked recipient address
    """

    kind: NotificationKind
    recipient: str

    @classmethod
    def create(
        cls,
        user_id: str,
        kind: NotificationKind,
        recipient: str,
        correlation_id: Optional[str] = None,
    ) -> 'ConfirmationNotificationSentEvent':
        return cls(
            occurred_at=datetime.now(timezone.utc),
            user_id=user_id,
            correlation_id=correlation_id,
            kind=kind,
            recipient=recipient,
        )
