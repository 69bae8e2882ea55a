"""Composed settings for Confirmail.

`Settings` merges the app, database, confirmation and email groups into one
pydantic-settings model read from the environment and an optional dotenv
file chosen by ``APP_ENV``:

- development: ``.env``; messages are logged, never sent
- test: ``.env.test``; messages are logged, never sent
- staging: ``.env.staging``; SMTP must be fully configured
- production: ``.env.production``; SMTP must be fully configured
"""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import model_validator
from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .confirmation import ConfirmationSettings
from .database import DatabaseSettings
from .email import EmailSettings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_ENV_FILES = {
    "development": ".env",
    "test": ".env.test",
    "staging": ".env.staging",
    "production": ".env.production",
}

_LOCAL_ENVS = ("development", "test")


class Settings(AppSettings, DatabaseSettings, ConfirmationSettings, EmailSettings):
    """All configuration groups in one model.

    Use the module-level ``settings`` instance rather than building new ones.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="allow"
    )

    @model_validator(mode="after")
    def apply_environment_defaults(self) -> "Settings":
        if self.APP_ENV in _LOCAL_ENVS:
            self.EMAIL_TEST_MODE = True
        if self.APP_ENV == "development":
            self.DEBUG = True
        return self

    def validate_required_fields(self) -> None:
        """Fail fast on configuration that has no safe default.

        Local environments only get a warning.

        Raises:
            ValueError: If SMTP is misconfigured in staging or production
        """
        try:
            self.validate_smtp_config()
        except ValueError as e:
            if self.APP_ENV in _LOCAL_ENVS:
                logger.warning("Ignoring email configuration problem in %s: %s", self.APP_ENV, e)
                return
            logger.error("Email configuration error: %s", e)
            raise


def _env_file_for(env: str) -> Optional[str]:
    candidate = _ENV_FILES.get(env, ".env")
    if Path(candidate).exists():
        return candidate
    if Path(".env").exists():
        return ".env"
    return None


def create_settings() -> Settings:
    """Build settings for the environment named by ``APP_ENV``."""
    env = os.getenv("APP_ENV", "development")
    env_file = _env_file_for(env)
    logger.info("Loading %s settings from %s", env, env_file or "environment only")
    return Settings(_env_file=env_file)


# Singleton settings instance used across the package.
settings = create_settings()
settings.validate_required_fields()
