"""Security helpers for logging sensitive values.

Addresses and tokens must never reach logs or events in full.
"""

from typing import Optional


def mask_email(email: Optional[str]) -> str:
    """Mask an email address for logs, keeping the first characters and the domain.

    >>> mask_email("jane.doe@example.com")
    'jan***@example.com'
    """
    if not email:
        return "unknown"
    if "@" not in email:
        return email[:3] + "***"
    local, _, domain = email.rpartition("@")
    return local[:3] + "***@" + domain


def token_prefix(token: Optional[str]) -> Optional[str]:
    """First eight characters of a presented token, or None."""
    if not token or not isinstance(token, str):
        return None
    return token[:8]
