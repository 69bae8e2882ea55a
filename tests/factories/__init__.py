from __future__ import annotations

"""Re-export factory functions for generating fake test data."""

# flake8: noqa: F401 – re-export

from .token import create_fake_token, create_fake_token_value
from .user_email_state import create_fake_state, create_pending_state

__all__ = [
    "create_fake_state",
    "create_pending_state",
    "create_fake_token",
    "create_fake_token_value",
]
