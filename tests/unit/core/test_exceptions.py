import pytest

from src.core.exceptions import (
    ConfirmailError,
    ConfirmationError,
    DispatchFailureError,
    TemplateRenderError,
    TokenExpiredError,
    TokenMismatchError,
    UserNotFoundError,
)
from src.utils.i18n import get_translated_message


def test_base_error_default_code():
    # Arrange
    message = "Something went wrong"

    # Act
    error = ConfirmailError(message)

    # Assert
    assert error.message == message
    assert error.code == "generic_error"
    assert str(error) == message


def test_token_mismatch_error_default():
    # Arrange
    message = get_translated_message("confirmation_link_invalid", "en")

    # Act
    error = TokenMismatchError()

    # Assert
    assert error.message == message
    assert error.code == "token_mismatch"
    assert isinstance(error, ConfirmationError)


def test_confirmation_failures_share_one_message():
    # Act
    mismatch = TokenMismatchError()
    expired = TokenExpiredError()

    # Assert
    assert mismatch.message == expired.message
    assert mismatch.code != expired.code


def test_confirmation_error_custom_message():
    # Act
    error = TokenExpiredError("custom", "custom_code")

    # Assert
    assert error.message == "custom"
    assert error.code == "custom_code"


def test_template_render_error_is_dispatch_failure():
    # Act
    error = TemplateRenderError("missing template")

    # Assert
    assert isinstance(error, DispatchFailureError)
    assert error.code == "template_render_error"


def test_user_not_found_error_is_raised_with_code():
    # Act / Assert
    with pytest.raises(ConfirmailError) as exc_info:
        raise UserNotFoundError("No confirmation record exists for this account.")
    assert exc_info.value.code == "user_not_found"
