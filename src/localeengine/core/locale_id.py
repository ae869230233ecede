"""Locale identifier value type and fallback chain construction.

LocaleId is the (language, region) pair that drives every resolution and
formatting decision. Construction normalizes case, so equality is an exact
match on normalized subtags.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from localeengine.locale_utils import get_system_locale, normalize_locale

__all__ = ["LocaleId", "detect_device_locale", "fallback_chain"]

_LANGUAGE_RE = re.compile(r"[a-z]{2,8}")
_REGION_RE = re.compile(r"[A-Z]{2}|[0-9]{3}")
_SCRIPT_RE = re.compile(r"[A-Za-z]{4}")


@dataclass(frozen=True, slots=True)
class LocaleId:
    """Immutable (language, region) locale identifier.

    Language is always present and lower-cased; region, if present, is
    upper-cased. A language-only identifier has ``region=None``.

    Examples:
        >>> LocaleId("ZH", "cn")
        LocaleId(language='zh', region='CN')
        >>> str(LocaleId("en", "US"))
        'en_US'
        >>> str(LocaleId("en"))
        'en'
        >>> LocaleId("zh", "CN") == LocaleId.parse("zh-cn")
        True

    Attributes:
        language: ISO 639 language subtag (lower-case)
        region: ISO 3166 region subtag (upper-case) or None
    """

    language: str
    region: str | None = None

    def __post_init__(self) -> None:
        """Normalize subtag case and validate shape.

        Raises:
            ValueError: If language is empty or either subtag is malformed
        """
        language = self.language.strip().lower() if isinstance(self.language, str) else ""
        if not _LANGUAGE_RE.fullmatch(language):
            msg = f"Invalid language subtag: {self.language!r}"
            raise ValueError(msg)
        object.__setattr__(self, "language", language)

        if self.region is None:
            return
        region = self.region.strip().upper() if isinstance(self.region, str) else ""
        if not region:
            object.__setattr__(self, "region", None)
            return
        if not _REGION_RE.fullmatch(region):
            msg = f"Invalid region subtag: {self.region!r}"
            raise ValueError(msg)
        object.__setattr__(self, "region", region)

    def __str__(self) -> str:
        return f"{self.language}_{self.region}" if self.region else self.language

    @classmethod
    def parse(cls, text: str) -> LocaleId:
        """Parse a locale string into a LocaleId.

        Accepts POSIX and BCP-47 separators, encoding suffixes and an
        optional script subtag (ignored).

        Args:
            text: Locale string (e.g., "zh_CN", "en-US", "ja", "zh_Hant_TW", "ko_KR.UTF-8")

        Returns:
            Normalized LocaleId

        Raises:
            ValueError: If text is not a recognizable locale string

        Example:
            >>> LocaleId.parse("zh_Hant_TW")
            LocaleId(language='zh', region='TW')
        """
        if not isinstance(text, str):
            msg = f"Locale must be a string, got {type(text).__name__}"
            raise TypeError(msg)

        parts = normalize_locale(text).split("_")
        match parts:
            case [language]:
                return cls(language)
            case [language, script] if _SCRIPT_RE.fullmatch(script):
                return cls(language)
            case [language, region]:
                return cls(language, region)
            case [language, script, region] if _SCRIPT_RE.fullmatch(script):
                return cls(language, region)
            case _:
                msg = f"Unrecognized locale string: {text!r}"
                raise ValueError(msg)

    @classmethod
    def try_parse(cls, text: str | None) -> LocaleId | None:
        """Parse a locale string, returning None instead of raising.

        Args:
            text: Locale string or None

        Returns:
            LocaleId, or None if text is None or malformed
        """
        if text is None:
            return None
        try:
            return cls.parse(text)
        except (ValueError, TypeError):
            return None

    @property
    def has_region(self) -> bool:
        """Check if identifier carries a region subtag."""
        return self.region is not None

    def language_only(self) -> LocaleId:
        """Return the language-only identifier for this locale.

        Example:
            >>> LocaleId("en", "GB").language_only()
            LocaleId(language='en', region=None)
        """
        if self.region is None:
            return self
        return LocaleId(self.language)

    def to_bcp47(self) -> str:
        """Return the BCP-47 form (e.g., "zh-CN")."""
        return f"{self.language}-{self.region}" if self.region else self.language


def fallback_chain(
    locale_id: LocaleId,
    default: LocaleId | None = None,
) -> tuple[LocaleId, ...]:
    """Build the ordered fallback chain for a locale.

    Order is exact, then language-only, then the default (if given).
    Duplicates are removed while preserving order, so a language-only
    locale or a locale equal to the default yields a shorter chain.

    Bundle selection passes the configured default; display-name lookup
    passes none and echoes the key instead.

    Args:
        locale_id: Requested locale
        default: Last-resort locale (optional)

    Returns:
        Tuple of distinct LocaleIds in priority order

    Example:
        >>> chain = fallback_chain(LocaleId("en", "GB"), LocaleId("zh", "CN"))
        >>> [str(link) for link in chain]
        ['en_GB', 'en', 'zh_CN']
    """
    links = [locale_id, locale_id.language_only()]
    if default is not None:
        links.append(default)
    # dict.fromkeys() removes duplicates while maintaining insertion order
    return tuple(dict.fromkeys(links))


def detect_device_locale() -> LocaleId | None:
    """Detect the device locale from the operating system environment.

    Returns:
        LocaleId for the system locale, or None when unset, a pseudo-locale
        (C/POSIX), or not parseable
    """
    return LocaleId.try_parse(get_system_locale())
