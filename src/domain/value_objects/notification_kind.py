"""Kinds of confirmation message the engine can ask to have sent."""

from enum import Enum


class NotificationKind(str, Enum):
    """Selects the message template outside the engine.

    The same values double as the purpose of an outstanding token: an
    activation token proves control of a brand-new account's address, a
    change token proves control of a pending new address.

    Attributes:
        NEW_ACCOUNT_ACTIVATION: First confirmation of a newly created account.
        ADDRESS_CHANGE_CONFIRMATION: Confirmation of a pending address change.
    """

    NEW_ACCOUNT_ACTIVATION = "new_account_activation"
    ADDRESS_CHANGE_CONFIRMATION = "address_change_confirmation"
