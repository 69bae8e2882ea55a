"""Confirmation Token Value Object.

This module defines the ConfirmationToken value object. It encapsulates
the rules for confirmation token format, comparison and age.

Key DDD Principles Applied:
- Value Object: Immutable and identity-less
- Domain Logic: Encapsulates token validation rules
- Fail-Safe: Constant-time comparison and masked representations
"""

import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import ClassVar, Optional

from src.utils.i18n import get_translated_message


class ConfirmationToken:
    """Value object representing a single-generation confirmation token.

    Security Features:
    - Constant-time comparison to prevent timing attacks
    - Token format validation (URL-safe base64 alphabet)
    - Masked string representations so tokens never reach logs in full
    """

    # 16 random bytes encode to 22 characters; anything shorter is too weak.
    MIN_LENGTH: ClassVar[int] = 22
    MAX_LENGTH: ClassVar[int] = 128
    TOKEN_PATTERN: ClassVar[re.Pattern] = re.compile(r"^[A-Za-z0-9_-]+$")

    __slots__ = ("_value", "_issued_at")

    def __init__(self, value: str, issued_at: Optional[datetime] = None):
        """Initialize confirmation token.

        Args:
            value: Token string value
            issued_at: Issue timestamp (defaults to current time, UTC)

        Raises:
            ValueError: If token format is invalid
        """
        self._value = self._validate_token_format(value)
        issued_at = issued_at or datetime.now(timezone.utc)
        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=timezone.utc)
        self._issued_at = issued_at

    @property
    def value(self) -> str:
        return self._value

    @property
    def issued_at(self) -> datetime:
        return self._issued_at

    @property
    def prefix(self) -> str:
        """First eight characters, safe to log."""
        return self._value[:8]

    @classmethod
    def from_existing(cls, value: str, issued_at: Optional[datetime] = None) -> "ConfirmationToken":
        """Rebuild a token from stored state.

        Raises:
            ValueError: If token format is invalid
        """
        return cls(value, issued_at)

    def matches(self, candidate: object) -> bool:
        """Compare a presented token against this one in constant time.

        Anything that is not a non-empty string never matches.
        """
        if isinstance(candidate, ConfirmationToken):
            candidate = candidate.value
        if not isinstance(candidate, str) or not candidate:
            return False
        return secrets.compare_digest(
            self._value.encode("utf-8"), candidate.encode("utf-8")
        )

    def is_expired(self, max_age: Optional[timedelta], now: Optional[datetime] = None) -> bool:
        """Whether the token is older than ``max_age``; never when ``max_age`` is None."""
        if max_age is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now - self._issued_at > max_age

    def _validate_token_format(self, value: str) -> str:
        if not value:
            raise ValueError(
                get_translated_message("confirmation_token_cannot_be_empty", "en")
            )

        if not isinstance(value, str):
            raise ValueError(
                get_translated_message("confirmation_token_must_be_string", "en")
            )

        if not (self.MIN_LENGTH <= len(value) <= self.MAX_LENGTH) or not self.TOKEN_PATTERN.match(value):
            raise ValueError(
                get_translated_message("confirmation_token_format_invalid", "en")
            )

        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfirmationToken):
            return False
        return self.matches(other)

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return f"{self._value[:8]}..."

    def __repr__(self) -> str:
        return f"ConfirmationToken(value='{self._value[:8]}...', issued_at={self._issued_at.isoformat()})"
