"""Per-user email confirmation state.

`UserEmailState` is the aggregate the confirmation engine reads and writes.
It lives alongside the external user record and is reached only through a
confirmation store.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from src.core.exceptions import ConfirmationStateError
from src.domain.value_objects.confirmation_token import ConfirmationToken
from src.domain.value_objects.notification_kind import NotificationKind


@dataclass(frozen=True)
class LastConfirmedChange:
    """The most recent committed address change.

    Attributes:
        from_email: Address before the change.
        to_email: Address after the change.
        at: When the change was committed.
    """

    from_email: str
    to_email: str
    at: datetime


@dataclass
class UserEmailState:
    """Confirmation state for one user.

    The engine works on a copy returned by the store and hands it back to
    ``save``; ``version`` is the optimistic-concurrency counter the store
    compares on every write.

    Attributes:
        user_id: Opaque identifier of the external user record.
        current_email: The confirmed, active address.
        pending_email: Address awaiting confirmation, if any.
        token: Outstanding confirmation token, if any.
        token_issued_at: When ``token`` was issued.
        token_purpose: What ``token`` confirms.
        last_confirmed_change: Most recent committed address change.
        email_changed_on_last_save: Whether the latest save moved the current
            or pending address to a new non-blank value.
        version: Store-managed write counter.
    """

    user_id: str
    current_email: str
    pending_email: Optional[str] = None
    token: Optional[str] = None
    token_issued_at: Optional[datetime] = None
    token_purpose: Optional[NotificationKind] = None
    last_confirmed_change: Optional[LastConfirmedChange] = None
    email_changed_on_last_save: bool = False
    version: int = field(default=0)

    @property
    def is_pending(self) -> bool:
        """True while an address change awaits confirmation."""
        return bool(self.pending_email)

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @property
    def display_email(self) -> str:
        return self.pending_email if self.pending_email else self.current_email

    @property
    def email_change_unconfirmed(self) -> bool:
        """True only for a real address change, never for a new account awaiting activation."""
        return bool(self.pending_email) and self.pending_email != self.current_email

    def outstanding_token(self) -> Optional[ConfirmationToken]:
        """The stored token as a value object, or None when nothing is outstanding."""
        if not self.token:
            return None
        return ConfirmationToken.from_existing(self.token, self.token_issued_at)

    def attach_token(
        self, token: ConfirmationToken, purpose: NotificationKind
    ) -> None:
        self.token = token.value
        self.token_issued_at = token.issued_at
        self.token_purpose = purpose

    def clear_pending(self) -> None:
        """Drop the pending address and its token together."""
        self.pending_email = None
        self.token = None
        self.token_issued_at = None
        self.token_purpose = None

    def check_invariants(self) -> None:
        """Raise ConfirmationStateError if the token/pending pairing is broken."""
        if self.pending_email:
            if not self.token:
                raise ConfirmationStateError("pending email without token")
            if self.pending_email == self.current_email:
                raise ConfirmationStateError("pending email equals current email")
            if self.token_purpose is not NotificationKind.ADDRESS_CHANGE_CONFIRMATION:
                raise ConfirmationStateError("pending email with an activation token")
        elif self.token and self.token_purpose is not NotificationKind.NEW_ACCOUNT_ACTIVATION:
            raise ConfirmationStateError("change token without pending email")
        if bool(self.token) != bool(self.token_issued_at):
            raise ConfirmationStateError("token without issue time")

    def copy(self) -> "UserEmailState":
        return replace(self)
