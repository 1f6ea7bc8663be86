# -*- coding: utf-8 -*-
"""
Internationalization (i18n) module for PomoFocus.

Provides translated notification texts and host labels.
Supports English and German with automatic system locale detection.
"""

import locale
import logging
from typing import Callable, List
from PySide6.QtCore import QLocale

from pomofocus.i18n.translations import TRANSLATIONS

logger = logging.getLogger(__name__)

# Supported languages
SUPPORTED_LANGUAGES = ["en", "de"]

# Current language (default to English)
_current_language = "en"

# Callbacks to notify when language changes
_language_changed_callbacks: List[Callable[[str], None]] = []


def detect_system_language() -> str:
    """
    Detect the system language and return a supported language code.

    Returns:
        'de' if German is detected, 'en' otherwise.
    """
    system_locale, _ = locale.getlocale()
    if system_locale and system_locale.lower().startswith('de'):
        return 'de'
    return 'en'


def get_language() -> str:
    """Get the current language code."""
    return _current_language


def set_language(lang: str) -> None:
    """
    Set the current language. 'auto' picks the system language.

    Args:
        lang: Language code ('en', 'de' or 'auto')
    """
    global _current_language
    if lang == 'auto':
        lang = detect_system_language()
    if lang not in SUPPORTED_LANGUAGES:
        lang = 'en'
    _current_language = lang

    # Update Qt Locale for dates and standard widgets
    if lang == 'de':
        QLocale.setDefault(QLocale(QLocale.German))
    else:
        QLocale.setDefault(QLocale(QLocale.English))

    for callback in _language_changed_callbacks:
        try:
            callback(lang)
        except Exception:
            logger.exception("Language change callback failed")


def tr(key: str, **kwargs) -> str:
    """
    Get the translated string for the given key.

    Args:
        key: Translation key (e.g., 'notify.work_complete.title')
        **kwargs: Format arguments for string interpolation

    Returns:
        Translated string, or the key itself if not found.
    """
    translations = TRANSLATIONS.get(_current_language, TRANSLATIONS['en'])
    text = translations.get(key) or TRANSLATIONS['en'].get(key, key)

    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, ValueError):
            logger.warning("Could not format translation %r with %r", key, kwargs)

    return text


def on_language_changed(callback: Callable[[str], None]) -> None:
    """
    Register a callback to be notified when language changes.

    Args:
        callback: Function that takes the new language code as argument.
    """
    if callback not in _language_changed_callbacks:
        _language_changed_callbacks.append(callback)
