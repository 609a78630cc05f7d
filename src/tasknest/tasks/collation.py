# src/tasknest/tasks/collation.py

from __future__ import annotations

"""
Locale-aware string collation.

Plain code-point comparison puts every uppercase Latin letter before every
lowercase one and mis-orders accented text. We compare with the Unicode
Collation Algorithm (pyuca). The default table (DUCET) already orders the
Hebrew alphabet and Latin scripts correctly, which covers the locales the
application ships ("he", "en"). Other locales fall back to the same table.
"""

import logging
from functools import lru_cache

from pyuca import Collator

logger = logging.getLogger(__name__)

SUPPORTED_LOCALES: frozenset[str] = frozenset({"he", "en"})
DEFAULT_LOCALE = "he"


@lru_cache(maxsize=1)
def _root_collator() -> Collator:
    # Loading the allkeys table takes a noticeable moment; do it once.
    logger.debug("Loading UCA collation table")
    return Collator()


def _base_language(locale: str | None) -> str:
    if not locale:
        return DEFAULT_LOCALE
    return locale.replace("_", "-").split("-", 1)[0].lower()


def get_collator(locale: str | None = DEFAULT_LOCALE) -> Collator:
    """
    Collator for `locale`.

    Every locale gets the same untailored UCA table (DUCET): pyuca ships no
    per-language tailorings, and DUCET already orders Hebrew and Latin text the
    way "he" and "en" users expect. `locale` only decides whether a debug note
    about the missing tailoring is logged.
    """
    lang = _base_language(locale)
    if lang not in SUPPORTED_LOCALES:
        logger.debug("No tailored collation for locale=%s; using the root table", locale)
    return _root_collator()


def collation_key(text: str, locale: str | None = DEFAULT_LOCALE) -> tuple[int, ...]:
    return tuple(get_collator(locale).sort_key(text))


def compare_strings(a: str, b: str, locale: str | None = DEFAULT_LOCALE) -> int:
    """Three-way comparison of two strings under the locale's collation."""
    ka = collation_key(a, locale)
    kb = collation_key(b, locale)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0
