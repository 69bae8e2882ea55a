"""Confirmation store implementation using SQLAlchemy.

This module persists `UserEmailState` in the ``user_email_states`` table.
Writes are compare-and-swap updates guarded by the ``version`` column, which
gives per-user mutual exclusion without holding row locks across the
engine's read-modify-write cycle.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from src.core.exceptions import (
    ConcurrentModificationError,
    DatabaseError,
    DuplicateStateError,
    UserNotFoundError,
)
from src.domain.entities.user_email_state import LastConfirmedChange, UserEmailState
from src.domain.interfaces import IConfirmationStore
from src.domain.value_objects.notification_kind import NotificationKind
from src.infrastructure.database.models import UserEmailStateRecord
from src.utils.i18n import get_translated_message

logger = get_logger(__name__)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo; every stored timestamp is UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlConfirmationStore(IConfirmationStore):
    """SQLAlchemy implementation of the confirmation store.

    - **Compare-and-swap**: ``UPDATE ... WHERE user_id = :id AND version = :v``;
      a zero rowcount means another writer won
    - **Transaction Management**: every operation commits or rolls back
    - **Error Handling**: driver errors are wrapped in ``DatabaseError``
    """

    def __init__(self, db_session: AsyncSession):
        """Initialize store with database session.

        Args:
            db_session: SQLAlchemy async session for database operations
        """
        self.db_session = db_session

    async def create(self, state: UserEmailState) -> UserEmailState:
        statement = insert(UserEmailStateRecord).values(
            user_id=state.user_id, version=1, **self._to_values(state)
        )
        try:
            await self.db_session.execute(statement)
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.warning("Duplicate confirmation state", user_id=state.user_id)
            raise DuplicateStateError(
                f"Confirmation state already exists for user {state.user_id}"
            ) from e
        except SQLAlchemyError as e:
            await self._fail("create", state.user_id, e)

        logger.debug("Confirmation state created", user_id=state.user_id)
        created = state.copy()
        created.version = 1
        return created

    async def load(self, user_id: str) -> UserEmailState:
        try:
            record = await self._get(user_id)
        except SQLAlchemyError as e:
            await self._fail("load", user_id, e)

        if record is None:
            raise UserNotFoundError(get_translated_message("confirmation_state_not_found", "en"))
        return self._to_state(record)

    async def save(self, state: UserEmailState) -> UserEmailState:
        statement = (
            update(UserEmailStateRecord)
            .where(
                UserEmailStateRecord.user_id == state.user_id,
                UserEmailStateRecord.version == state.version,
            )
            .values(version=state.version + 1, **self._to_values(state))
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db_session.execute(statement)
            if result.rowcount != 1:
                await self.db_session.rollback()
                if await self._get(state.user_id) is None:
                    raise UserNotFoundError(
                        get_translated_message("confirmation_state_not_found", "en")
                    )
                logger.warning(
                    "Stale confirmation state rejected",
                    user_id=state.user_id,
                    expected_version=state.version,
                )
                raise ConcurrentModificationError(
                    f"Confirmation state for user {state.user_id} was modified concurrently"
                )
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self._fail("save", state.user_id, e)

        state.version += 1
        return state.copy()

    async def delete(self, user_id: str) -> None:
        statement = delete(UserEmailStateRecord).where(UserEmailStateRecord.user_id == user_id)
        try:
            result = await self.db_session.execute(statement)
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self._fail("delete", user_id, e)

        if result.rowcount == 0:
            raise UserNotFoundError(get_translated_message("confirmation_state_not_found", "en"))

    async def _get(self, user_id: str) -> Optional[UserEmailStateRecord]:
        statement = (
            select(UserEmailStateRecord)
            .where(UserEmailStateRecord.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db_session.execute(statement)
        return result.scalars().first()

    async def _fail(self, operation: str, user_id: str, error: SQLAlchemyError) -> None:
        await self.db_session.rollback()
        logger.error(
            "Confirmation store operation failed",
            operation=operation,
            user_id=user_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        raise DatabaseError(f"Confirmation store {operation} failed") from error

    @staticmethod
    def _to_values(state: UserEmailState) -> Dict[str, Any]:
        change = state.last_confirmed_change
        return {
            "current_email": state.current_email,
            "pending_email": state.pending_email,
            "token": state.token,
            "token_issued_at": state.token_issued_at,
            "token_purpose": state.token_purpose.value if state.token_purpose else None,
            "last_change_from": change.from_email if change else None,
            "last_change_to": change.to_email if change else None,
            "last_change_at": change.at if change else None,
            "email_changed_on_last_save": state.email_changed_on_last_save,
        }

    @staticmethod
    def _to_state(record: UserEmailStateRecord) -> UserEmailState:
        change = None
        if record.last_change_to is not None:
            change = LastConfirmedChange(
                from_email=record.last_change_from,
                to_email=record.last_change_to,
                at=_aware(record.last_change_at),
            )
        return UserEmailState(
            user_id=record.user_id,
            current_email=record.current_email,
            pending_email=record.pending_email,
            token=record.token,
            token_issued_at=_aware(record.token_issued_at),
            token_purpose=NotificationKind(record.token_purpose) if record.token_purpose else None,
            last_confirmed_change=change,
            email_changed_on_last_save=record.email_changed_on_last_save,
            version=record.version,
        )
