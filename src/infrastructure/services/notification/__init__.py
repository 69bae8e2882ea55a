"""Notification dispatchers for confirmation messages."""

from .logging_dispatcher import LoggingNotificationDispatcher, SentNotification
from .smtp_dispatcher import SmtpNotificationDispatcher

__all__ = ["LoggingNotificationDispatcher", "SentNotification", "SmtpNotificationDispatcher"]
