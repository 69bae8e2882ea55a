"""Domain services.

- Email Confirmation: pending address tracking, token issue and confirmation
"""

from .email_confirmation import CommitResult, ConfirmationEngine, ConfirmationEngineConfig

__all__ = ["ConfirmationEngine", "ConfirmationEngineConfig", "CommitResult"]
