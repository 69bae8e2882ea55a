from __future__ import annotations

"""
Translated messages for confirmation errors and email subjects.

Catalogs live under ``locales/<lang>/LC_MESSAGES/messages.po`` at the project
root. Compiled ``.mo`` files are used through gettext when present; the
``.po`` sources are parsed as well, so a fresh checkout translates without a
compile step.

Message keys are stable identifiers (``confirmation_link_invalid``) rather
than English source strings.
"""

import gettext
import os
from typing import Dict, Optional

from src.core.config.settings import settings
from src.core.logging import logger

_translations: Dict[str, gettext.NullTranslations] = {}

# Secondary lookup built from the .po sources, per language.
_fallback_catalogs: Dict[str, Dict[str, str]] = {}

_MAX_PO_BYTES = 10 * 1024 * 1024


def _locales_path() -> str:
    base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
    return os.path.join(base_dir, "locales")


def _parse_po(po_path: str) -> Dict[str, str]:
    """Read single-line ``msgid``/``msgstr`` pairs from a .po file.

    An empty ``msgstr`` maps the key to itself; the header entry is skipped.
    """
    catalog: Dict[str, str] = {}
    msgid: Optional[str] = None
    with open(po_path, "r", encoding="utf-8") as po_file:
        for raw_line in po_file:
            line = raw_line.strip()
            if line.startswith("msgid "):
                msgid = line[len("msgid "):].strip().strip('"')
            elif line.startswith("msgstr ") and msgid is not None:
                msgstr = line[len("msgstr "):].strip().strip('"')
                if msgid:
                    catalog[msgid] = msgstr or msgid
                msgid = None
    return catalog


def setup_i18n(locales_path: Optional[str] = None) -> None:
    """
    Load catalogs for every language in ``settings.SUPPORTED_LANGUAGES``.

    Args:
        locales_path: Override for the locales directory.

    Raises:
        FileNotFoundError: If the locales directory does not exist.
    """
    locales_path = locales_path or _locales_path()
    if not os.path.isdir(locales_path):
        raise FileNotFoundError(f"Locales directory not found: {locales_path}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _translations[lang] = gettext.translation(
            domain="messages",
            localedir=locales_path,
            languages=[lang],
            fallback=True,
        )

        po_path = os.path.join(locales_path, lang, "LC_MESSAGES", "messages.po")
        if not os.path.exists(po_path):
            _fallback_catalogs[lang] = {}
            continue
        if os.path.getsize(po_path) > _MAX_PO_BYTES:
            logger.warning("i18n_po_file_too_large", lang=lang, path=po_path)
            _fallback_catalogs[lang] = {}
            continue

        _fallback_catalogs[lang] = _parse_po(po_path)
        logger.debug("i18n_catalog_loaded", language=lang, entries=len(_fallback_catalogs[lang]))


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE) -> str:
    """
    Translate ``key`` into ``locale``.

    Catalogs are loaded on first use. Unsupported locales fall back to the
    default language, and an unknown key comes back unchanged.
    """
    if not _translations:
        try:
            setup_i18n()
        except FileNotFoundError as exc:
            logger.error("i18n_setup_failed", error=str(exc))
            return key

    if locale not in _translations:
        logger.warning("unsupported_locale_requested", requested_locale=locale,
                       fallback_locale=settings.DEFAULT_LANGUAGE)
        locale = settings.DEFAULT_LANGUAGE

    translation = _translations.get(locale)
    if translation is None:
        logger.error("translation_missing_for_locale", locale=locale)
        return key

    translated = translation.gettext(key)
    if translated != key:
        return translated

    translated = _fallback_catalogs.get(locale, {}).get(key, key)
    if translated == key:
        logger.warning("translation_key_not_found", key=key, locale=locale)
    return translated
