"""SMTP notification dispatcher.

Renders the confirmation message for a notification kind from Jinja2
templates and hands it to FastMail. Template selection lives here, not in
the engine.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema
from fastapi_mail.schemas import MessageType, MultipartSubtypeEnum
from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from src.core.config.settings import settings as default_settings
from src.core.exceptions import DispatchFailureError, TemplateRenderError
from src.domain.interfaces import INotificationDispatcher
from src.domain.value_objects.confirmation_token import ConfirmationToken
from src.domain.value_objects.notification_kind import NotificationKind
from src.utils.i18n import get_translated_message
from src.utils.security import mask_email

logger = structlog.get_logger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parents[4]

_SUBJECT_KEYS = {
    NotificationKind.NEW_ACCOUNT_ACTIVATION: "account_activation_subject",
    NotificationKind.ADDRESS_CHANGE_CONFIRMATION: "email_change_confirmation_subject",
}


class SmtpNotificationDispatcher(INotificationDispatcher):
    """Sends confirmation messages over SMTP.

    Features:
    - Template stem per notification kind, language-specific with fallback
      to the default language
    - HTML body with a plain-text alternative
    - Auto-escaped HTML rendering
    - Test mode logs the rendered message instead of sending it
    """

    def __init__(self, settings=default_settings, fastmail: Optional[FastMail] = None):
        """Initialize the dispatcher.

        Args:
            settings: Settings providing SMTP, template and URL configuration
            fastmail: Preconfigured FastMail client; built from settings when omitted
        """
        self._settings = settings
        self._test_mode = settings.EMAIL_TEST_MODE
        self._templates = {
            NotificationKind.NEW_ACCOUNT_ACTIVATION: settings.NEW_ACCOUNT_ACTIVATION_TEMPLATE,
            NotificationKind.ADDRESS_CHANGE_CONFIRMATION: settings.ADDRESS_CHANGE_CONFIRMATION_TEMPLATE,
        }

        template_dir = Path(settings.EMAIL_TEMPLATES_DIR)
        if not template_dir.is_absolute():
            template_dir = _PROJECT_ROOT / template_dir
        self._jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        if fastmail is not None or self._test_mode:
            self._fastmail = fastmail
        else:
            self._fastmail = FastMail(self._connection_config())

        logger.info(
            "SmtpNotificationDispatcher initialized",
            test_mode=self._test_mode,
            templates_dir=str(template_dir),
        )

    async def send(
        self,
        user_id: str,
        kind: NotificationKind,
        recipient: str,
        token: ConfirmationToken,
        language: str = "en",
    ) -> None:
        subject = get_translated_message(_SUBJECT_KEYS[kind], language)
        html_content, text_content = self.render(kind, user_id, recipient, token, language)

        if self._fastmail is None:
            logger.info(
                "Confirmation email (test mode)",
                user_id=user_id,
                kind=kind.value,
                recipient=mask_email(recipient),
                subject=subject,
                html_length=len(html_content),
                text_length=len(text_content),
            )
            return

        message = MessageSchema(
            subject=subject,
            recipients=[recipient],
            body=html_content,
            alternative_body=text_content,
            subtype=MessageType.html,
            multipart_subtype=MultipartSubtypeEnum.alternative,
        )
        try:
            await self._fastmail.send_message(message)
        except Exception as e:
            logger.error(
                "Failed to send confirmation email",
                user_id=user_id,
                kind=kind.value,
                recipient=mask_email(recipient),
                error=str(e),
            )
            raise DispatchFailureError(f"Failed to send confirmation email: {e}") from e

        logger.info(
            "Confirmation email sent",
            user_id=user_id,
            kind=kind.value,
            recipient=mask_email(recipient),
            subject=subject,
        )

    def render(
        self,
        kind: NotificationKind,
        user_id: str,
        recipient: str,
        token: ConfirmationToken,
        language: str = "en",
    ) -> Tuple[str, str]:
        """Render the HTML and plain-text bodies for a message.

        Raises:
            TemplateRenderError: If no template exists or rendering fails
        """
        context = {
            "recipient": recipient,
            "confirmation_url": self.confirmation_url(user_id, token),
            "app_name": self._settings.PROJECT_NAME,
            "support_email": self._settings.SUPPORT_EMAIL,
            "issued_at": token.issued_at,
        }
        stem = self._templates[kind]
        return (
            self._render_template(stem, "html", language, context),
            self._render_template(stem, "txt", language, context),
        )

    def confirmation_url(self, user_id: str, token: ConfirmationToken) -> str:
        query = urlencode({"user": user_id, "token": token.value})
        return f"{self._settings.CONFIRMATION_URL_BASE}?{query}"

    def _render_template(
        self, stem: str, extension: str, language: str, context: Dict[str, Any]
    ) -> str:
        names = [f"{stem}_{language}.{extension}"]
        if language != self._settings.DEFAULT_LANGUAGE:
            names.append(f"{stem}_{self._settings.DEFAULT_LANGUAGE}.{extension}")
        try:
            template = self._jinja_env.select_template(names)
            return template.render(**context)
        except TemplateNotFound as e:
            logger.error("Template not found", templates=names, error=str(e))
            raise TemplateRenderError(f"Template file not found: {names[0]}") from e
        except TemplateError as e:
            logger.error("Template rendering failed", templates=names, error=str(e))
            raise TemplateRenderError(f"Template rendering failed: {e}") from e

    def _connection_config(self) -> ConnectionConfig:
        s = self._settings
        return ConnectionConfig(
            MAIL_USERNAME=s.SMTP_USERNAME or "",
            MAIL_PASSWORD=s.SMTP_PASSWORD.get_secret_value() if s.SMTP_PASSWORD else "",
            MAIL_FROM=s.FROM_EMAIL,
            MAIL_FROM_NAME=s.FROM_NAME,
            MAIL_PORT=s.SMTP_PORT,
            MAIL_SERVER=s.SMTP_HOST,
            MAIL_STARTTLS=s.SMTP_USE_TLS,
            MAIL_SSL_TLS=s.SMTP_USE_SSL,
            USE_CREDENTIALS=bool(s.SMTP_USERNAME and s.SMTP_PASSWORD),
            VALIDATE_CERTS=True,
            TIMEOUT=s.SMTP_TIMEOUT_SECONDS,
        )
