"""Active locale resolution.

Pure function combining the saved preference, the device locale and the
catalog into the active LocaleId. Total and deterministic: the configured
default guarantees a result.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging

from localeengine.catalog import LocaleCatalog
from localeengine.constants import DEFAULT_LOCALE_TAG
from localeengine.core.locale_id import LocaleId

__all__ = ["resolve_locale"]

logger = logging.getLogger(__name__)

_DEFAULT_LOCALE = LocaleId.parse(DEFAULT_LOCALE_TAG)


def resolve_locale(
    device_locale: LocaleId | None,
    saved_preference: LocaleId | None,
    catalog: LocaleCatalog,
    *,
    default: LocaleId = _DEFAULT_LOCALE,
) -> LocaleId:
    """Resolve the active locale.

    Priority order:
    1. Saved preference, if the catalog contains it exactly
    2. Device locale, exact (language, region) match in catalog order
    3. Device locale, language-only match; the first entry in catalog
       order wins, not the closest region
    4. The configured default

    Args:
        device_locale: Locale reported by the device (None if unknown)
        saved_preference: Locale persisted by an explicit user choice
        catalog: Supported locales
        default: Result when nothing matches (default: zh_CN)

    Returns:
        The resolved LocaleId (never None)

    Examples:
        >>> from localeengine.catalog import DEFAULT_CATALOG
        >>> str(resolve_locale(LocaleId("ja", "JP"), None, DEFAULT_CATALOG))
        'ja_JP'
        >>> str(resolve_locale(LocaleId("en", "GB"), None, DEFAULT_CATALOG))
        'en_US'
        >>> str(resolve_locale(LocaleId("ja", "JP"), LocaleId("ko", "KR"), DEFAULT_CATALOG))
        'ko_KR'
        >>> str(resolve_locale(None, None, DEFAULT_CATALOG))
        'zh_CN'
    """
    if saved_preference is not None and catalog.find(saved_preference) is not None:
        return saved_preference

    if device_locale is not None:
        for entry in catalog.entries():
            if entry.locale_id == device_locale:
                return entry.locale_id

        for entry in catalog.entries():
            if entry.language == device_locale.language:
                logger.debug(
                    "Device locale %s matched %s by language", device_locale, entry.locale_id
                )
                return entry.locale_id

    logger.debug(
        "No catalog match for device=%s saved=%s; using default %s",
        device_locale,
        saved_preference,
        default,
    )
    return default
