"""Notification dispatcher that logs instead of sending.

Used in development and test environments (``EMAIL_TEST_MODE``) and as a
recording fake in tests.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import structlog

from src.domain.interfaces import INotificationDispatcher
from src.domain.value_objects.confirmation_token import ConfirmationToken
from src.domain.value_objects.notification_kind import NotificationKind
from src.utils.security import mask_email

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SentNotification:
    """A message accepted by the logging dispatcher."""

    user_id: str
    kind: NotificationKind
    recipient: str
    token: ConfirmationToken
    language: str
    sent_at: datetime


class LoggingNotificationDispatcher(INotificationDispatcher):
    """Records messages in memory and logs them with masked addresses."""

    def __init__(self):
        self.sent: List[SentNotification] = []

    async def send(
        self,
        user_id: str,
        kind: NotificationKind,
        recipient: str,
        token: ConfirmationToken,
        language: str = "en",
    ) -> None:
        self.sent.append(
            SentNotification(
                user_id=user_id,
                kind=kind,
                recipient=recipient,
                token=token,
                language=language,
                sent_at=datetime.now(timezone.utc),
            )
        )
        logger.info(
            "Confirmation message (test mode)",
            user_id=user_id,
            kind=kind.value,
            recipient=mask_email(recipient),
            token_prefix=token.prefix,
            language=language,
        )

    def last_for(self, user_id: str) -> Optional[SentNotification]:
        for notification in reversed(self.sent):
            if notification.user_id == user_id:
                return notification
        return None
