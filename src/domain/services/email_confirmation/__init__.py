"""Email change confirmation domain services."""

from .confirmation_engine import CommitResult, ConfirmationEngine, ConfirmationEngineConfig

__all__ = ["ConfirmationEngine", "ConfirmationEngineConfig", "CommitResult"]
