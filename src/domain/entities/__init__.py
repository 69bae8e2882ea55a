"""Export confirmation domain entities."""

from .user_email_state import LastConfirmedChange, UserEmailState

__all__ = ["UserEmailState", "LastConfirmedChange"]
