from __future__ import annotations

"""Centralized, structured exception hierarchy for Confirmail.

Every exception carries a machine-readable `code` for programmatic handling
and a human-readable `message` for logging and user feedback.

The hierarchy is designed to:
- Provide clear, specific errors for each failure of the confirmation workflow.
- Keep user-facing confirmation failures generic to prevent enumeration.
- Let callers map errors to transport status codes in their own API layer.
- Offer a consistent structure for logging and monitoring.
"""

from typing import Final

from src.utils.i18n import get_translated_message

__all__: Final = [
    "ConfirmailError",
    "ValidationError",
    "ConfirmationError",
    "TokenMismatchError",
    "TokenExpiredError",
    "ConfirmationStateError",
    "UserNotFoundError",
    "DuplicateStateError",
    "ConcurrentModificationError",
    "DatabaseError",
    "EntropySourceUnavailableError",
    "DispatchFailureError",
    "TemplateRenderError",
]


class ConfirmailError(Exception):
    """Base exception class for all custom errors in Confirmail.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
                       This message can be translated.
        code (str): A unique, machine-readable error code for identifying
                    the type of error programmatically.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class ValidationError(ConfirmailError):
    """Raised for data validation failures on engine inputs.

    A blank or unchanged address passed to ``request_change`` is not an
    error; it is ignored silently.
    """

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Confirmation errors (typically map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ConfirmationError(ConfirmailError):
    """Base class for failed confirmation attempts.

    All subclasses share the same generic, translated message
    ("invalid or expired confirmation link") so that the user cannot tell
    which condition failed. Only ``code`` differs, for logging.
    """

    def __init__(self, message: str | None = None, code: str = "confirmation_error"):
        if message is None:
            message = get_translated_message("confirmation_link_invalid", "en")
        super().__init__(message, code)


class TokenMismatchError(ConfirmationError):
    """Raised when the presented token is absent, wrong, consumed or superseded."""

    def __init__(self, message: str | None = None, code: str = "token_mismatch"):
        super().__init__(message, code)


class TokenExpiredError(ConfirmationError):
    """Raised when the token is older than the configured maximum age."""

    def __init__(self, message: str | None = None, code: str = "token_expired"):
        super().__init__(message, code)


class ConfirmationStateError(ConfirmailError):
    """Raised when an operation needs an outstanding token and there is none,
    or when a state breaks the token and pending address pairing."""

    def __init__(self, message: str, code: str = "confirmation_state_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


class UserNotFoundError(ConfirmailError):
    """Raised when no confirmation state exists for the requested user.

    Fatal to the calling operation and propagated unchanged.
    """

    def __init__(self, message: str, code: str = "user_not_found"):
        super().__init__(message, code)


class DuplicateStateError(ConfirmailError):
    """Raised when creating confirmation state for a user that already has one."""

    def __init__(self, message: str, code: str = "duplicate_state"):
        super().__init__(message, code)


class ConcurrentModificationError(ConfirmailError):
    """Raised when a save lost a compare-and-swap race on the state version.

    The write is discarded. Retrying is the caller's decision.
    """

    def __init__(self, message: str, code: str = "concurrent_modification"):
        super().__init__(message, code)


class DatabaseError(ConfirmailError):
    """Raised for low-level database interaction errors.

    Wraps underlying driver errors, abstracting away implementation details.
    """

    def __init__(self, message: str, code: str = "database_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------


class EntropySourceUnavailableError(ConfirmailError):
    """Raised when the OS random source cannot produce token bytes.

    Fatal: token generation never degrades to a weaker source.
    """

    def __init__(self, message: str, code: str = "entropy_source_unavailable"):
        super().__init__(message, code)


class DispatchFailureError(ConfirmailError):
    """Raised when a confirmation message could not be handed to the transport.

    Does not roll back state that was already committed.
    """

    def __init__(self, message: str, code: str = "dispatch_failure"):
        super().__init__(message, code)


class TemplateRenderError(DispatchFailureError):
    """Raised when an email template cannot be found or rendered."""

    def __init__(self, message: str, code: str = "template_render_error"):
        super().__init__(message, code)
