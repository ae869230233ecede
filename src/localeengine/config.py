"""Engine configuration.

Provides a single frozen dataclass that encapsulates the tunable parameters
shared by resolution, bundle loading, plural selection and persistence.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from localeengine.constants import (
    DEFAULT_LOAD_TIMEOUT,
    DEFAULT_LOADER_WORKERS,
    DEFAULT_LOCALE_TAG,
    NO_PLURAL_LANGUAGES,
    PREFERENCE_KEY,
)
from localeengine.core.locale_id import LocaleId

__all__ = ["DEFAULT_CONFIG", "EngineConfig"]


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable configuration for a localization session.

    All fields have sensible defaults; constructing ``EngineConfig()`` with
    no arguments produces the shipped behaviour.

    Attributes:
        default_locale: Locale used when resolution finds no match, and the
            last link of every bundle fallback chain (default: zh_CN).
        no_plural_languages: Language subtags that always select the
            "other" plural category.
        preference_key: Preference store key for the saved locale.
        load_timeout: Seconds to wait for one bundle load; None waits
            indefinitely (default: 5.0).
        max_loader_workers: Threads used for provider calls (default: 4).

    Example:
        >>> config = EngineConfig(default_locale=LocaleId("en", "US"), load_timeout=1.0)
        >>> str(config.default_locale)
        'en_US'
    """

    default_locale: LocaleId = LocaleId.parse(DEFAULT_LOCALE_TAG)
    no_plural_languages: frozenset[str] = NO_PLURAL_LANGUAGES
    preference_key: str = PREFERENCE_KEY
    load_timeout: float | None = DEFAULT_LOAD_TIMEOUT
    max_loader_workers: int = DEFAULT_LOADER_WORKERS

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            TypeError: If default_locale is not a LocaleId
            ValueError: If preference_key is empty, load_timeout is not
                positive, or max_loader_workers is not positive
        """
        if not isinstance(self.default_locale, LocaleId):
            msg = f"default_locale must be a LocaleId, got {type(self.default_locale).__name__}"
            raise TypeError(msg)
        if not self.preference_key:
            msg = "preference_key must be non-empty"
            raise ValueError(msg)
        if self.load_timeout is not None and self.load_timeout <= 0:
            msg = "load_timeout must be positive or None"
            raise ValueError(msg)
        if self.max_loader_workers <= 0:
            msg = "max_loader_workers must be positive"
            raise ValueError(msg)
        object.__setattr__(
            self,
            "no_plural_languages",
            frozenset(language.lower() for language in self.no_plural_languages),
        )


DEFAULT_CONFIG = EngineConfig()
