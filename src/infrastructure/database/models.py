"""SQLModel table backing confirmation state.

Maps `UserEmailState` onto the column set
``(current_email, pending_email, token, token_issued_at, ...)`` in a sidecar
table keyed by the external user id.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String


class UserEmailStateRecord(SQLModel, table=True):
    """Persistent row for one user's confirmation state.

    Attributes:
        user_id: External user identifier (primary key).
        current_email: Confirmed, active address.
        pending_email: Address awaiting confirmation.
        token: Outstanding confirmation token; unique across users.
        token_issued_at: When the token was issued.
        token_purpose: What the token confirms.
        last_change_from: Address before the last committed change.
        last_change_to: Address after the last committed change.
        last_change_at: When the last change was committed.
        email_changed_on_last_save: Notification gate recorded on every write.
        version: Optimistic-concurrency counter.
    """

    __tablename__ = "user_email_states"

    user_id: str = Field(
        primary_key=True,
        max_length=64,
        description="Identifier of the external user record.",
    )
    current_email: str = Field(
        sa_column=Column(String(254), nullable=False),
        description="Confirmed, active email address.",
    )
    pending_email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(254), nullable=True),
        description="Email address awaiting confirmation.",
    )
    token: Optional[str] = Field(
        default=None,
        sa_column=Column(String(128), unique=True, index=True, nullable=True),
        description="Outstanding confirmation token.",
    )
    token_issued_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="When the outstanding token was issued.",
    )
    token_purpose: Optional[str] = Field(
        default=None,
        max_length=32,
        description="What the outstanding token confirms.",
    )
    last_change_from: Optional[str] = Field(default=None, max_length=254)
    last_change_to: Optional[str] = Field(default=None, max_length=254)
    last_change_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    email_changed_on_last_save: bool = Field(default=False)
    version: int = Field(default=1, ge=1)
