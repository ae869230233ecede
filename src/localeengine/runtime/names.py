"""Key-indexed display name lookup.

Display names for domain keys (categories, account types) live in
per-locale maps. Lookup walks the same fallback chain as bundle selection,
minus the default link: exact locale, language-only locale, then the key
itself.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from localeengine.core.locale_id import LocaleId, fallback_chain

__all__ = ["localized_name"]

logger = logging.getLogger(__name__)


def localized_name(
    domain_key: str,
    map_by_locale: Mapping[str, Mapping[str, str]],
    locale_id: LocaleId,
) -> str:
    """Look up the display name of a domain key for a locale.

    Args:
        domain_key: Key to name (e.g., "food")
        map_by_locale: Locale string ("en_US", "en") -> key -> display name
        locale_id: Active locale

    Returns:
        Display name from the first chain link that has one, else domain_key

    Example:
        >>> names = {"en": {"food": "Food"}, "zh_CN": {"food": "餐饮"}}
        >>> localized_name("food", names, LocaleId("en", "GB"))
        'Food'
        >>> localized_name("rent", names, LocaleId("en", "GB"))
        'rent'
    """
    for link in fallback_chain(locale_id):
        names = map_by_locale.get(str(link))
        if names is None:
            continue
        name = names.get(domain_key)
        if name is not None:
            return name
    logger.debug("No display name for '%s' under %s; echoing key", domain_key, locale_id)
    return domain_key
