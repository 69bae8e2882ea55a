"""Confirmation workflow settings.

Controls token lifetime and the link that confirmation messages point to.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ConfirmationSettings(BaseSettings):
    """Settings for the email-change confirmation engine.

    Attributes:
        CONFIRMATION_TOKEN_MAX_AGE_MINUTES: Maximum token age. ``None`` keeps
            tokens valid until they are consumed or superseded.
        CONFIRMATION_URL_BASE: Base URL of the frontend confirmation page.
    """

    CONFIRMATION_TOKEN_MAX_AGE_MINUTES: Optional[int] = Field(
        default=None,
        ge=1,
        le=60 * 24 * 30,
        description="Token expiry in minutes; unset disables expiry",
    )
    CONFIRMATION_URL_BASE: str = Field(
        default="http://localhost:3000/confirm-email",
        description="Base URL for confirmation links in outgoing messages",
    )
