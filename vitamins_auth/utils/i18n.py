"""
Internationalization (i18n) utility for user-facing form errors.

Catalogs live in `vitamins_auth/locales/<lang>/LC_MESSAGES/messages.po` and are
loaded through gettext. The .po files are also parsed into an in-memory
catalog, so messages are available even where no compiled .mo file exists.
Unknown languages fall back to settings.DEFAULT_LANGUAGE, and unknown keys fall
back to the key itself so a missing entry is visible in the UI instead of
crashing the flow.
"""

import gettext
import os
from typing import Dict, List, Optional

from vitamins_auth.core.config.settings import settings
from vitamins_auth.core.logging import logger

LOCALES_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "locales")

_translations: Dict[str, gettext.NullTranslations] = {}

# Secondary lookup parsed from the .po files, used when gettext has no compiled
# catalog for a language or the .mo file is out of date.
_fallback_catalogs: Dict[str, Dict[str, str]] = {}


def _parse_po(po_path: str) -> Dict[str, str]:
    catalog: Dict[str, str] = {}
    current_msgid: Optional[str] = None
    with open(po_path, "r", encoding="utf-8") as po_file:
        for raw_line in po_file:
            line = raw_line.strip()
            if line.startswith("msgid "):
                current_msgid = line[6:].strip().strip('"')
            elif line.startswith("msgstr ") and current_msgid is not None:
                msgstr = line[7:].strip().strip('"')
                if current_msgid:
                    catalog[current_msgid] = msgstr or current_msgid
                current_msgid = None
    return catalog


def setup_i18n(locales_path: str = LOCALES_PATH) -> None:
    """
    Load the translations of every supported language.

    Raises:
        FileNotFoundError: If the locales directory is missing.
    """
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
        catalog: Dict[str, str] = {}
        if os.path.exists(po_path):
            try:
                catalog = _parse_po(po_path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("i18n_po_parse_failed", lang=lang, error=str(exc))
        _fallback_catalogs[lang] = catalog
        logger.debug("i18n_initialized", language=lang, entries=len(catalog))


def supported_languages() -> List[str]:
    if not _translations:
        setup_i18n()
    return sorted(_translations)


def get_translated_message(key: str, language: Optional[str] = None) -> str:
    """
    Translate a message key into the requested language.

    Args:
        key: Catalog key, e.g. "email_required".
        language: Language code; defaults to settings.DEFAULT_LANGUAGE.

    Returns:
        The translated message, or the key itself when no catalog has it.
    """
    if not _translations:
        setup_i18n()

    lang = language or settings.DEFAULT_LANGUAGE
    if lang not in _translations:
        logger.warning(
            "unsupported_locale_requested",
            requested_locale=lang,
            fallback_locale=settings.DEFAULT_LANGUAGE,
        )
        lang = settings.DEFAULT_LANGUAGE

    translation = _translations.get(lang)
    translated = translation.gettext(key) if translation is not None else key
    if translated == key:
        translated = _fallback_catalogs.get(lang, {}).get(key, key)
        if translated == key:
            logger.warning("translation_key_not_found", key=key, locale=lang)
    return translated
