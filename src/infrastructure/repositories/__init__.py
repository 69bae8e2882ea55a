"""Confirmation store implementations for the infrastructure layer."""

from .confirmation_store import SqlConfirmationStore
from .in_memory_confirmation_store import InMemoryConfirmationStore

__all__ = ["SqlConfirmationStore", "InMemoryConfirmationStore"]
