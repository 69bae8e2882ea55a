"""Tests for the SMTP notification dispatcher."""

from unittest.mock import AsyncMock

import pytest

from src.core.config.settings import settings
from src.core.exceptions import DispatchFailureError, TemplateRenderError
from src.domain.value_objects.notification_kind import NotificationKind
from src.infrastructure.services.notification import SmtpNotificationDispatcher
from tests.factories import create_fake_token


@pytest.fixture
def smtp_settings():
    return settings.model_copy(
        update={
            "EMAIL_TEST_MODE": False,
            "CONFIRMATION_URL_BASE": "https://app.example.com/confirm",
            "PROJECT_NAME": "Confirmail",
        }
    )


@pytest.fixture
def fastmail():
    return AsyncMock()


@pytest.fixture
def smtp_dispatcher(smtp_settings, fastmail):
    return SmtpNotificationDispatcher(smtp_settings, fastmail=fastmail)


def test_confirmation_url_carries_user_and_token(smtp_dispatcher):
    token = create_fake_token()

    url = smtp_dispatcher.confirmation_url("u 1", token)

    assert url == f"https://app.example.com/confirm?user=u+1&token={token.value}"


@pytest.mark.parametrize(
    "kind, expected",
    [
        (NotificationKind.NEW_ACCOUNT_ACTIVATION, "activate your account"),
        (NotificationKind.ADDRESS_CHANGE_CONFIRMATION, "confirm your new address"),
    ],
)
def test_render_selects_template_by_kind(smtp_dispatcher, kind, expected):
    token = create_fake_token()

    html, text = smtp_dispatcher.render(kind, "u1", "new@x.com", token)

    assert expected in text.lower()
    assert token.value in html
    assert f"user=u1&token={token.value}" in text
    assert "new@x.com" in html


def test_render_uses_requested_language(smtp_dispatcher):
    _, text = smtp_dispatcher.render(
        NotificationKind.ADDRESS_CHANGE_CONFIRMATION, "u1", "new@x.com", create_fake_token(), "es"
    )

    assert "Confirma tu nueva dirección" in text


def test_render_falls_back_to_default_language(smtp_dispatcher):
    _, text = smtp_dispatcher.render(
        NotificationKind.ADDRESS_CHANGE_CONFIRMATION, "u1", "new@x.com", create_fake_token(), "fr"
    )

    assert "confirm your new address" in text.lower()


def test_html_escapes_recipient(smtp_dispatcher):
    html, _ = smtp_dispatcher.render(
        NotificationKind.NEW_ACCOUNT_ACTIVATION, "u1", "<b>x</b>@x.com", create_fake_token()
    )

    assert "<b>x</b>" not in html
    assert "&lt;b&gt;" in html


def test_missing_template_raises(smtp_settings, fastmail):
    dispatcher = SmtpNotificationDispatcher(
        smtp_settings.model_copy(update={"NEW_ACCOUNT_ACTIVATION_TEMPLATE": "does_not_exist"}),
        fastmail=fastmail,
    )

    with pytest.raises(TemplateRenderError):
        dispatcher.render(NotificationKind.NEW_ACCOUNT_ACTIVATION, "u1", "a@x.com", create_fake_token())


@pytest.mark.asyncio
async def test_send_hands_message_to_fastmail(smtp_dispatcher, fastmail):
    token = create_fake_token()

    await smtp_dispatcher.send(
        user_id="u1",
        kind=NotificationKind.ADDRESS_CHANGE_CONFIRMATION,
        recipient="new@x.com",
        token=token,
    )

    fastmail.send_message.assert_awaited_once()
    message = fastmail.send_message.call_args.args[0]
    assert message.subject == "Confirm your new email address"
    assert [r.email for r in message.recipients] == ["new@x.com"]
    assert token.value in message.body


@pytest.mark.asyncio
async def test_send_failure_raises_dispatch_failure(smtp_dispatcher, fastmail):
    fastmail.send_message.side_effect = ConnectionRefusedError("smtp down")

    with pytest.raises(DispatchFailureError) as exc_info:
        await smtp_dispatcher.send(
            user_id="u1",
            kind=NotificationKind.NEW_ACCOUNT_ACTIVATION,
            recipient="old@x.com",
            token=create_fake_token(),
        )

    assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)


@pytest.mark.asyncio
async def test_test_mode_renders_without_sending():
    dispatcher = SmtpNotificationDispatcher(settings.model_copy(update={"EMAIL_TEST_MODE": True}))

    await dispatcher.send(
        user_id="u1",
        kind=NotificationKind.NEW_ACCOUNT_ACTIVATION,
        recipient="old@x.com",
        token=create_fake_token(),
    )
