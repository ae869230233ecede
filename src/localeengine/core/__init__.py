"""Core value types shared across catalog, localization and runtime layers.

This package provides the locale identifier that every other layer depends
on. By isolating it here, we maintain a clean dependency graph:

    core <- catalog <- localization.loading <- runtime <- localization.session

Exports:
    LocaleId: Immutable (language, region) identifier
    fallback_chain: Exact -> language-only -> default chain builder
    detect_device_locale: OS/environment locale detection

Python 3.13+.
"""

from .locale_id import LocaleId, detect_device_locale, fallback_chain

__all__ = ["LocaleId", "detect_device_locale", "fallback_chain"]
