import pytest

from src.core.config.settings import settings
from src.utils import i18n
from src.utils.i18n import get_translated_message, setup_i18n


def test_setup_i18n_loads_supported_languages():
    """Test successful setup of i18n translations."""
    setup_i18n()

    for lang in settings.SUPPORTED_LANGUAGES:
        assert lang in i18n._translations
        assert "confirmation_link_invalid" in i18n._fallback_catalogs[lang]


def test_setup_i18n_locales_not_found(tmp_path):
    """Test setup_i18n when locales directory is not found."""
    with pytest.raises(FileNotFoundError):
        setup_i18n(str(tmp_path / "missing"))


def test_get_translated_message_english():
    assert get_translated_message("confirmation_link_invalid", "en") == (
        "The confirmation link is invalid or has expired."
    )


def test_get_translated_message_spanish():
    message = get_translated_message("email_change_confirmation_subject", "es")

    assert message != "email_change_confirmation_subject"
    assert message != get_translated_message("email_change_confirmation_subject", "en")


def test_get_translated_message_unsupported_locale_falls_back():
    assert get_translated_message("confirmation_link_invalid", "xx") == get_translated_message(
        "confirmation_link_invalid", settings.DEFAULT_LANGUAGE
    )


def test_get_translated_message_unknown_key_returns_key():
    assert get_translated_message("no_such_key", "en") == "no_such_key"


def test_get_translated_message_uses_gettext_first():
    """Test successful retrieval of a translated message."""
    class _Translation:
        def gettext(self, key):
            return "Translated text"

    setup_i18n()
    original = i18n._translations.get(settings.DEFAULT_LANGUAGE)
    i18n._translations[settings.DEFAULT_LANGUAGE] = _Translation()
    try:
        assert get_translated_message("test_key", settings.DEFAULT_LANGUAGE) == "Translated text"
    finally:
        i18n._translations[settings.DEFAULT_LANGUAGE] = original
