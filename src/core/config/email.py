"""Outgoing mail settings.

Used by the SMTP notification dispatcher to reach the mail server and to pick
the template rendered for each kind of confirmation message.
"""

from typing import List, Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """SMTP transport and confirmation template settings.

    The password is a ``SecretStr`` so it never shows up in reprs or logs.
    STARTTLS is on by default; implicit TLS is the alternative for port 465.

    Attributes:
        SMTP_HOST: Mail server host
        SMTP_PORT: Mail server port
        SMTP_USERNAME: Login for authenticated relays
        SMTP_PASSWORD: Password for authenticated relays
        SMTP_USE_TLS: Upgrade the connection with STARTTLS
        SMTP_USE_SSL: Connect with implicit TLS
        SMTP_TIMEOUT_SECONDS: Timeout for one delivery attempt
        FROM_EMAIL: Sender address of confirmation messages
        FROM_NAME: Sender display name
        EMAIL_TEMPLATES_DIR: Template directory, relative to the project root
        NEW_ACCOUNT_ACTIVATION_TEMPLATE: Template stem for activation messages
        ADDRESS_CHANGE_CONFIRMATION_TEMPLATE: Template stem for change messages
        EMAIL_TEST_MODE: Render and log messages instead of sending them
    """

    SMTP_HOST: str = Field(default="localhost", description="Mail server host")
    SMTP_PORT: int = Field(default=587, ge=1, le=65535, description="Mail server port")
    SMTP_USERNAME: Optional[str] = Field(default=None, description="Relay login")
    SMTP_PASSWORD: Optional[SecretStr] = Field(default=None, description="Relay password")
    SMTP_USE_TLS: bool = Field(default=True, description="Use STARTTLS")
    SMTP_USE_SSL: bool = Field(default=False, description="Use implicit TLS")
    SMTP_TIMEOUT_SECONDS: int = Field(default=10, ge=1, le=120)

    FROM_EMAIL: EmailStr = Field(default="noreply@example.com")
    FROM_NAME: str = Field(default="Confirmail")

    EMAIL_TEMPLATES_DIR: str = Field(default="templates/email")
    NEW_ACCOUNT_ACTIVATION_TEMPLATE: str = Field(
        default="account_activation",
        description="Stem of the templates sent to confirm a new account",
    )
    ADDRESS_CHANGE_CONFIRMATION_TEMPLATE: str = Field(
        default="email_change_confirmation",
        description="Stem of the templates sent to confirm a new address",
    )

    EMAIL_TEST_MODE: bool = Field(
        default=False,
        description="Log rendered messages instead of delivering them",
    )

    def smtp_config_problems(self) -> List[str]:
        """List what is wrong with the SMTP settings for real delivery."""
        problems = []
        if not self.SMTP_USERNAME or not self.SMTP_PASSWORD:
            problems.append("SMTP_USERNAME and SMTP_PASSWORD must both be set")
        if self.SMTP_USE_TLS == self.SMTP_USE_SSL:
            problems.append("exactly one of SMTP_USE_TLS and SMTP_USE_SSL must be enabled")
        return problems

    def validate_smtp_config(self) -> None:
        """Check that messages can actually be delivered.

        Skipped in test mode, where nothing is sent.

        Raises:
            ValueError: Listing every SMTP setting that needs fixing
        """
        if self.EMAIL_TEST_MODE:
            return
        problems = self.smtp_config_problems()
        if problems:
            raise ValueError("Invalid SMTP configuration: " + "; ".join(problems))
