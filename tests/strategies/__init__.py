"""Hypothesis strategies for localeengine property-based testing.

Usage:
    from tests.strategies import locale_ids, catalogs, amounts
"""

from .locales import (
    LANGUAGES,
    REGIONS,
    amounts,
    catalogs,
    language_only_ids,
    locale_ids,
    regional_ids,
)

__all__ = [
    "LANGUAGES",
    "REGIONS",
    "amounts",
    "catalogs",
    "language_only_ids",
    "locale_ids",
    "regional_ids",
]
