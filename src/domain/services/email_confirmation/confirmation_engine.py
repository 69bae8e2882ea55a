"""Email Change Confirmation Engine.

This domain service owns the email-change confirmation workflow: it records a
pending new address, issues single-generation tokens, verifies them exactly
once and commits the change.

Per user the workflow cycles between two states:

- ``Confirmed``: no pending address, no change token.
- ``PendingConfirmation``: a pending address paired with one live token.

Every operation is a load, mutate and compare-and-swap save against the
confirmation store, so two writers for the same user can never interleave.
Nothing is retried here; retry policy belongs to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, NoReturn, Optional

import structlog

from src.core.exceptions import (
    ConcurrentModificationError,
    ConfirmationError,
    ConfirmationStateError,
    DispatchFailureError,
    TokenExpiredError,
    TokenMismatchError,
    ValidationError,
)
from src.domain.entities.user_email_state import LastConfirmedChange, UserEmailState
from src.domain.events import (
    BaseDomainEvent,
    ConfirmationNotificationSentEvent,
    EmailChangeCancelledEvent,
    EmailChangeConfirmedEvent,
    EmailChangeRequestedEvent,
    EmailConfirmationFailedEvent,
)
from src.domain.interfaces import (
    IAccountActivator,
    IConfirmationStore,
    IEventPublisher,
    INotificationDispatcher,
    ITokenGenerator,
)
from src.domain.value_objects.confirmation_token import ConfirmationToken
from src.domain.value_objects.notification_kind import NotificationKind
from src.utils.i18n import get_translated_message
from src.utils.security import mask_email, token_prefix

logger = structlog.get_logger(__name__)


def _identity_kinds() -> Mapping[NotificationKind, NotificationKind]:
    return {kind: kind for kind in NotificationKind}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConfirmationEngineConfig:
    """Explicit engine configuration.

    Attributes:
        token_max_age: Maximum token age accepted by ``confirm``. ``None``
            keeps tokens valid until consumed or superseded.
        notification_kinds: Maps the purpose of an outstanding token to the
            kind of message sent for it. Identity by default.
    """

    token_max_age: Optional[timedelta] = None
    notification_kinds: Mapping[NotificationKind, NotificationKind] = field(
        default_factory=_identity_kinds
    )

    @classmethod
    def from_settings(cls, settings) -> "ConfirmationEngineConfig":
        minutes = getattr(settings, "CONFIRMATION_TOKEN_MAX_AGE_MINUTES", None)
        return cls(token_max_age=timedelta(minutes=minutes) if minutes else None)

    def kind_for(self, purpose: NotificationKind) -> NotificationKind:
        return self.notification_kinds.get(purpose, purpose)


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a successful ``confirm``.

    Attributes:
        user_id: The confirmed user.
        email_committed: Whether the current address changed.
        previous_email: Current address before the commit.
        current_email: Current address after the commit.
        activated: Whether the account activation hook ran.
    """

    user_id: str
    email_committed: bool
    previous_email: str
    current_email: str
    activated: bool = False


class ConfirmationEngine:
    """Domain service for email-change confirmation.

    Responsibilities:
    - Record pending addresses and issue tokens
    - Verify tokens in constant time and commit address changes
    - Cancel pending changes
    - Decide whether a confirmation message is warranted and send it
    - Publish domain events for audit trails

    Security Features:
    - Single-generation tokens: any newer token invalidates older ones
    - Consumed tokens are cleared in the same write that commits the change
    - Generic error messages for every confirmation failure
    """

    def __init__(
        self,
        store: IConfirmationStore,
        token_generator: ITokenGenerator,
        dispatcher: INotificationDispatcher,
        config: Optional[ConfirmationEngineConfig] = None,
        activator: Optional[IAccountActivator] = None,
        event_publisher: Optional[IEventPublisher] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the engine with its collaborators.

        Args:
            store: Persistence for per-user confirmation state
            token_generator: Source of new confirmation tokens
            dispatcher: Sends confirmation messages
            config: Token lifetime and notification kind mapping
            activator: Optional hook for accounts that start unactivated
            event_publisher: Optional publisher for domain events
            clock: Returns the current UTC time
        """
        self._store = store
        self._token_generator = token_generator
        self._dispatcher = dispatcher
        self._config = config or ConfirmationEngineConfig()
        self._activator = activator
        self._event_publisher = event_publisher
        self._clock = clock

        logger.info(
            "ConfirmationEngine initialized",
            token_max_age=str(self._config.token_max_age) if self._config.token_max_age else None,
            activation_enabled=activator is not None,
        )

    @property
    def config(self) -> ConfirmationEngineConfig:
        return self._config

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def register(self, user_id: str, email: str) -> UserEmailState:
        """Create confirmation state alongside a new user record.

        The state starts ``Confirmed`` with no token. Call
        ``deliver_confirmation`` afterwards when the account needs activation.

        Raises:
            ValidationError: If ``user_id`` is blank
            DuplicateStateError: If the user already has confirmation state
        """
        if not user_id or not user_id.strip():
            raise ValidationError("user_id must not be blank")

        state = UserEmailState(
            user_id=user_id,
            current_email=email,
            email_changed_on_last_save=bool(email),
        )
        stored = await self._store.create(state)
        logger.info("Confirmation state registered", user_id=user_id, email=mask_email(email))
        return stored

    async def unregister(self, user_id: str) -> None:
        """Destroy confirmation state together with the user record."""
        await self._store.delete(user_id)
        logger.info("Confirmation state removed", user_id=user_id)

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def request_change(
        self, user_id: str, new_email: Optional[str], correlation_id: Optional[str] = None
    ) -> bool:
        """Record ``new_email`` as pending and issue a fresh token.

        A blank address, or one equal to the current address, is ignored:
        nothing is written and ``False`` is returned. The current address is
        never touched here, and no message is sent.

        Returns:
            bool: True if a new pending address and token were stored

        Raises:
            UserNotFoundError: If the user has no confirmation state
            EntropySourceUnavailableError: If no token could be generated
            ConcurrentModificationError: If another writer saved first
        """
        state = await self._store.load(user_id)

        if not new_email or not new_email.strip() or new_email == state.current_email:
            logger.debug("Email change ignored, address blank or unchanged", user_id=user_id)
            return False

        token = self._new_token()
        state.pending_email = new_email
        state.attach_token(token, NotificationKind.ADDRESS_CHANGE_CONFIRMATION)
        state.email_changed_on_last_save = True
        await self._store.save(state)

        logger.info(
            "Email change requested",
            user_id=user_id,
            pending_email=mask_email(new_email),
            token_prefix=token.prefix,
        )
        await self._publish(
            EmailChangeRequestedEvent.create(
                user_id=user_id,
                pending_email=mask_email(new_email),
                token_prefix=token.prefix,
                correlation_id=correlation_id,
            )
        )
        return True

    async def issue_token(self, user_id: str) -> ConfirmationToken:
        """Replace the outstanding token with a fresh one.

        With a pending address the new token confirms that address. Without
        one it is an activation token for a new account. Either way every
        previously issued token stops working.

        Raises:
            UserNotFoundError: If the user has no confirmation state
            EntropySourceUnavailableError: If no token could be generated
            ConcurrentModificationError: If another writer saved first
        """
        state = await self._store.load(user_id)
        token = self._new_token()
        purpose = (
            NotificationKind.ADDRESS_CHANGE_CONFIRMATION
            if state.pending_email
            else NotificationKind.NEW_ACCOUNT_ACTIVATION
        )
        state.attach_token(token, purpose)
        state.email_changed_on_last_save = False
        await self._store.save(state)

        logger.info(
            "Confirmation token issued",
            user_id=user_id,
            purpose=purpose.value,
            token_prefix=token.prefix,
        )
        return token

    async def confirm(
        self, user_id: str, token: str, correlation_id: Optional[str] = None
    ) -> CommitResult:
        """Consume ``token`` and commit the pending address, if any.

        Without a pending address (a new account being activated) the
        confirmation still succeeds but leaves the current address alone.

        Returns:
            CommitResult: Whether an address was committed, for the caller's
                logging and notification decisions

        Raises:
            TokenMismatchError: If the token is absent, wrong, consumed or superseded
            TokenExpiredError: If ``token_max_age`` is set and exceeded
            UserNotFoundError: If the user has no confirmation state
        """
        state = await self._store.load(user_id)
        stored = state.outstanding_token()

        if stored is None or not stored.matches(token):
            await self._reject(user_id, TokenMismatchError(), token, correlation_id)
        if stored.is_expired(self._config.token_max_age, self._clock()):
            await self._reject(user_id, TokenExpiredError(), token, correlation_id)

        previous_email = state.current_email
        committed = bool(state.pending_email)
        if committed:
            state.current_email = state.pending_email
            state.last_confirmed_change = LastConfirmedChange(
                from_email=previous_email,
                to_email=state.current_email,
                at=self._clock(),
            )
        state.clear_pending()
        state.email_changed_on_last_save = committed

        # Activate before the token is consumed; a failed activation leaves the link usable.
        activated = await self._activate_if_needed(user_id)

        try:
            await self._store.save(state)
        except ConcurrentModificationError:
            # Every competing write consumes, clears or replaces the token.
            await self._reject(user_id, TokenMismatchError(), token, correlation_id)

        logger.info(
            "Email confirmation completed",
            user_id=user_id,
            email_committed=committed,
            current_email=mask_email(state.current_email),
            activated=activated,
        )
        await self._publish(
            EmailChangeConfirmedEvent.create(
                user_id=user_id,
                email_committed=committed,
                previous_email=mask_email(previous_email),
                current_email=mask_email(state.current_email),
                activated=activated,
                correlation_id=correlation_id,
            )
        )
        return CommitResult(
            user_id=user_id,
            email_committed=committed,
            previous_email=previous_email,
            current_email=state.current_email,
            activated=activated,
        )

    async def cancel(self, user_id: str, correlation_id: Optional[str] = None) -> None:
        """Discard the pending address and its token without promoting it.

        Idempotent: with no pending change only a stale "changed on last
        save" flag is cleared, and nothing else is written.

        Raises:
            UserNotFoundError: If the user has no confirmation state
        """
        state = await self._store.load(user_id)
        if not state.pending_email:
            if state.email_changed_on_last_save:
                state.email_changed_on_last_save = False
                await self._store.save(state)
            logger.debug("Cancel skipped, no pending change", user_id=user_id)
            return

        pending = state.pending_email
        state.clear_pending()
        state.email_changed_on_last_save = False
        await self._store.save(state)

        logger.info("Email change cancelled", user_id=user_id, pending_email=mask_email(pending))
        await self._publish(
            EmailChangeCancelledEvent.create(
                user_id=user_id,
                pending_email=mask_email(pending),
                correlation_id=correlation_id,
            )
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def email_changed_on_last_commit(self, user_id: str) -> bool:
        """Whether the latest save moved the current or pending address to a new non-blank value.

        True right after ``request_change`` issued a token or ``confirm``
        committed an address; false after a no-op confirmation or a cancel.
        """
        state = await self._store.load(user_id)
        return state.email_changed_on_last_save

    async def pending_display_email(self, user_id: str) -> str:
        """The pending address if there is one, else the current address."""
        state = await self._store.load(user_id)
        return state.display_email

    async def email_change_unconfirmed(self, user_id: str) -> bool:
        """True while a real address change awaits confirmation."""
        state = await self._store.load(user_id)
        return state.email_change_unconfirmed

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    async def notify(
        self,
        user_id: str,
        kind: Optional[NotificationKind] = None,
        language: str = "en",
        correlation_id: Optional[str] = None,
    ) -> None:
        """Send the outstanding token to the address it confirms.

        Args:
            user_id: User to notify
            kind: Message kind; defaults to the configured kind for the
                token's purpose
            language: Language code for the message content
            correlation_id: Request correlation ID for tracking

        Raises:
            ConfirmationStateError: If no token is outstanding
            DispatchFailureError: If the dispatcher failed. State that was
                already committed stays committed.
        """
        state = await self._store.load(user_id)
        token = state.outstanding_token()
        if token is None:
            raise ConfirmationStateError(
                get_translated_message("confirmation_nothing_to_send", language)
            )

        kind = kind or self._config.kind_for(state.token_purpose)
        recipient = state.display_email

        try:
            await self._dispatcher.send(
                user_id=user_id,
                kind=kind,
                recipient=recipient,
                token=token,
                language=language,
            )
        except DispatchFailureError as e:
            logger.error(
                "Confirmation notification failed",
                user_id=user_id,
                kind=kind.value,
                error=str(e),
            )
            raise
        except Exception as e:
            logger.error(
                "Confirmation notification failed",
                user_id=user_id,
                kind=kind.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DispatchFailureError(
                get_translated_message("confirmation_dispatch_failed", language)
            ) from e

        logger.info(
            "Confirmation notification sent",
            user_id=user_id,
            kind=kind.value,
            recipient=mask_email(recipient),
            token_prefix=token.prefix,
        )
        await self._publish(
            ConfirmationNotificationSentEvent.create(
                user_id=user_id,
                kind=kind,
                recipient=mask_email(recipient),
                correlation_id=correlation_id,
            )
        )

    async def deliver_confirmation(
        self,
        user_id: str,
        kind: Optional[NotificationKind] = None,
        language: str = "en",
        correlation_id: Optional[str] = None,
    ) -> ConfirmationToken:
        """Issue a fresh token and send it.

        Used right after account creation and for "resend" flows.
        """
        token = await self.issue_token(user_id)
        await self.notify(user_id, kind=kind, language=language, correlation_id=correlation_id)
        return token

    async def maybe_deliver_confirmation(
        self,
        user_id: str,
        language: str = "en",
        correlation_id: Optional[str] = None,
    ) -> bool:
        """Send the outstanding token only if the last save changed an address.

        Right after ``register`` no token exists yet, so this returns False;
        new accounts are sent their activation link with
        ``deliver_confirmation`` instead.

        Returns:
            bool: True if a message was sent
        """
        state = await self._store.load(user_id)
        if not state.email_changed_on_last_save or not state.has_token:
            return False
        await self.notify(user_id, language=language, correlation_id=correlation_id)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _reject(
        self,
        user_id: str,
        error: ConfirmationError,
        presented: object,
        correlation_id: Optional[str],
    ) -> NoReturn:
        prefix = token_prefix(presented if isinstance(presented, str) else None)
        logger.warning(
            "Email confirmation rejected",
            user_id=user_id,
            reason=error.code,
            token_prefix=prefix,
        )
        await self._publish(
            EmailConfirmationFailedEvent.create(
                user_id=user_id,
                failure_reason=error.code,
                token_prefix=prefix,
                correlation_id=correlation_id,
            )
        )
        raise error

    def _new_token(self) -> ConfirmationToken:
        # Issue time comes from the engine clock, the clock expiry is checked against.
        generated = self._token_generator.generate()
        return ConfirmationToken(generated.value, self._clock())

    async def _activate_if_needed(self, user_id: str) -> bool:
        if self._activator is None:
            return False
        if await self._activator.is_activated(user_id):
            return False
        await self._activator.activate(user_id)
        logger.info("Account activated on confirmation", user_id=user_id)
        return True

    async def _publish(self, event: BaseDomainEvent) -> None:
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception as e:
            logger.error(
                "Failed to publish domain event",
                event_type=type(event).__name__,
                user_id=event.user_id,
                error=str(e),
            )
