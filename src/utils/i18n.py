"""Message catalogs for user-facing error details.

Every ``detail`` string the API returns is looked up here by key. Catalogs live
under ``locales/<lang>/LC_MESSAGES/messages.{po,mo}``. The compiled ``.mo`` is
read through gettext; the ``.po`` source is also parsed so a key added without
recompiling still resolves.
"""

import gettext
import os
from typing import Dict, Iterator, Optional, Tuple

import structlog
from fastapi import Request

from src.core.config.settings import settings

logger = structlog.get_logger(__name__)

LOCALES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "locales"))
DOMAIN = "messages"


class _Catalog:
    """Compiled translations for one language plus the raw ``.po`` entries."""

    def __init__(self, compiled: gettext.NullTranslations, source: Dict[str, str]):
        self.compiled = compiled
        self.source = source

    def lookup(self, key: str) -> Optional[str]:
        translated = self.compiled.gettext(key)
        if translated != key:
            return translated
        return self.source.get(key)


_catalogs: Dict[str, _Catalog] = {}


def _iter_po_entries(po_path: str) -> Iterator[Tuple[str, str]]:
    msgid: Optional[str] = None
    with open(po_path, "r", encoding="utf-8") as handle:
        for line in map(str.strip, handle):
            if line.startswith("msgid "):
                msgid = line[len("msgid "):].strip('"')
            elif line.startswith("msgstr ") and msgid is not None:
                # The empty msgid is the catalog header.
                if msgid:
                    yield msgid, line[len("msgstr "):].strip('"') or msgid
                msgid = None


def _load_catalog(locales_path: str, lang: str) -> _Catalog:
    compiled = gettext.translation(DOMAIN, localedir=locales_path, languages=[lang], fallback=True)
    po_path = os.path.join(locales_path, lang, "LC_MESSAGES", f"{DOMAIN}.po")
    source: Dict[str, str] = {}
    if os.path.exists(po_path):
        try:
            source = dict(_iter_po_entries(po_path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("i18n_po_parse_failed", lang=lang, error=str(exc))
    return _Catalog(compiled, source)


def setup_i18n(locales_path: str = LOCALES_PATH) -> None:
    """Load a catalog for every supported language.

    Raises:
        FileNotFoundError: If ``locales_path`` does not exist.
    """
    if not os.path.isdir(locales_path):
        raise FileNotFoundError(f"Locales directory not found: {locales_path}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _catalogs[lang] = _load_catalog(locales_path, lang)
        logger.debug("i18n_catalog_loaded", language=lang, entries=len(_catalogs[lang].source))

    logger.info("i18n_setup_complete", languages=list(_catalogs), default=settings.DEFAULT_LANGUAGE)


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE) -> str:
    """Translate `key` into `locale`.

    Unknown locales use the default language. A key with no translation is
    returned unchanged.
    """
    catalog = _catalogs.get(locale) or _catalogs.get(settings.DEFAULT_LANGUAGE)
    if catalog is None:
        logger.error("i18n_not_initialized", locale=locale)
        return key

    translated = catalog.lookup(key)
    if translated is None:
        logger.warning("translation_key_not_found", key=key, locale=locale)
        return key
    return translated


def _accept_language_codes(header: str) -> Iterator[str]:
    # "es-MX;q=0.8" -> "es"; order of the header is kept, q-values are not ranked.
    for part in header.split(","):
        code = part.split(";", 1)[0].strip().split("-", 1)[0]
        if code:
            yield code


def get_request_language(request: Request) -> str:
    """Pick the response language: ``?lang=``, then ``Accept-Language``, then the default."""
    supported = settings.SUPPORTED_LANGUAGES

    query_lang = request.query_params.get("lang")
    if query_lang in supported:
        return query_lang

    header = request.headers.get("Accept-Language", "")
    return next(
        (code for code in _accept_language_codes(header) if code in supported),
        settings.DEFAULT_LANGUAGE,
    )
