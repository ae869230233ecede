"""Locale string helpers shared by LocaleId parsing and Babel lookups.

Babel expects POSIX identifiers ("zh_CN"); devices and users supply BCP-47
("zh-CN") or environment values ("zh_CN.UTF-8"). Everything funnels
through normalize_locale() so cache keys agree.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
]

# Pseudo-locales meaning "no locale configured"
_UNSET_LOCALES = frozenset({"", "C", "POSIX"})

# Environment variables consulted after the OS locale, highest priority first
_LOCALE_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")


def normalize_locale(locale_code: str) -> str:
    """Reduce a locale string to the underscore form Babel parses.

    Hyphens become underscores; ``.encoding`` and ``@modifier`` suffixes
    are dropped. Case is left to LocaleId.

    Examples:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("zh_CN.UTF-8")
        'zh_CN'
        >>> normalize_locale("ja")
        'ja'
    """
    code = locale_code.strip().split(".", 1)[0].split("@", 1)[0]
    return code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get the Babel Locale for a locale string, memoized per string.

    Args:
        locale_code: "zh_CN", "zh-CN" and similar spellings

    Returns:
        Babel Locale

    Raises:
        babel.UnknownLocaleError: If CLDR has no data for the locale
        ValueError: If Babel cannot parse the string
    """
    # Deferred so importing localeengine does not load CLDR data
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def _usable(code: str | None) -> str | None:
    if not code:
        return None
    normalized = normalize_locale(code)
    return None if normalized in _UNSET_LOCALES else normalized


def get_system_locale() -> str | None:
    """Read the device locale from the OS, then from the environment.

    The OS answer (``locale.getlocale()``) wins; otherwise LC_ALL,
    LC_MESSAGES and LANG are tried in that order. "C" and "POSIX" count
    as unset.

    Returns:
        Locale string in underscore form, or None when nothing usable is set

    Example:
        >>> import os
        >>> os.environ["LANG"] = "ko_KR.UTF-8"
        >>> get_system_locale()  # doctest: +SKIP
        'ko_KR'
    """
    import locale  # noqa: PLC0415

    try:
        from_os = _usable(locale.getlocale()[0])
    except ValueError:
        from_os = None
    if from_os is not None:
        return from_os

    for name in _LOCALE_ENV_VARS:
        found = _usable(os.environ.get(name))
        if found is not None:
            return found
    return None
