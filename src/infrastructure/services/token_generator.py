"""Infrastructure implementation of the token generator.

Tokens come straight from the operating system's CSPRNG through the
``secrets`` module.
"""

import secrets
from datetime import datetime, timezone

import structlog

from src.core.exceptions import EntropySourceUnavailableError
from src.domain.interfaces import ITokenGenerator
from src.domain.value_objects.confirmation_token import ConfirmationToken

logger = structlog.get_logger(__name__)


class SecureTokenGenerator(ITokenGenerator):
    """Generates URL-safe confirmation tokens.

    Security Features:
    - 32 random bytes (256 bits) by default, never fewer than 16 (128 bits)
    - URL-safe base64 encoding so tokens fit in confirmation links unescaped
    - No fallback to a weaker random source
    """

    MIN_BYTES = 16
    MAX_BYTES = 96

    def __init__(self, nbytes: int = 32):
        """Initialize token generator.

        Args:
            nbytes: Number of random bytes per token

        Raises:
            ValueError: If ``nbytes`` is outside the supported range
        """
        if not self.MIN_BYTES <= nbytes <= self.MAX_BYTES:
            raise ValueError(
                f"Token entropy must be between {self.MIN_BYTES} and {self.MAX_BYTES} bytes"
            )
        self._nbytes = nbytes

    def generate(self) -> ConfirmationToken:
        """Generate a new secure confirmation token.

        Raises:
            EntropySourceUnavailableError: If the OS random source fails
        """
        try:
            value = secrets.token_urlsafe(self._nbytes)
        except (NotImplementedError, OSError) as e:
            logger.critical("Secure random source unavailable", error=str(e))
            raise EntropySourceUnavailableError(
                "Secure random source unavailable; refusing to issue a confirmation token"
            ) from e

        token = ConfirmationToken(value, datetime.now(timezone.utc))
        logger.debug(
            "Generated new confirmation token",
            token_prefix=token.prefix,
            security_bits=self._nbytes * 8,
        )
        return token
