"""Static registry of supported locales.

LocaleCatalog is built once from configuration records and never mutated
afterwards. Lookup is an exact (language, region) match; fallback is the
resolver's job, not the catalog's.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeAlias

from localeengine.core.locale_id import LocaleId

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_CATALOG_RECORDS",
    "LocaleCatalog",
    "LocaleEntry",
]

CatalogRecord: TypeAlias = tuple[str, str | None, str, str]
"""(language, region, display_name, presentation_tag) configuration tuple."""


@dataclass(frozen=True, slots=True)
class LocaleEntry:
    """Supported locale with presentation metadata.

    Attributes:
        locale_id: Identifier matched by the resolver
        display_name: Name shown in the locale picker, in its own language
        presentation_tag: Flag or icon tag used by the presentation layer
    """

    locale_id: LocaleId
    display_name: str
    presentation_tag: str = ""

    @property
    def language(self) -> str:
        """Language subtag of the entry's identifier."""
        return self.locale_id.language

    @property
    def region(self) -> str | None:
        """Region subtag of the entry's identifier."""
        return self.locale_id.region


class LocaleCatalog:
    """Ordered, read-only collection of LocaleEntry.

    Insertion order is preserved and significant: the resolver's
    language-only match picks the first entry in catalog order.

    Example:
        >>> catalog = LocaleCatalog.from_records([
        ...     ("en", "US", "English", "us"),
        ...     ("ja", "JP", "日本語", "jp"),
        ... ])
        >>> [str(entry.locale_id) for entry in catalog.entries()]
        ['en_US', 'ja_JP']
        >>> catalog.find(LocaleId("en", "GB")) is None
        True
    """

    __slots__ = ("_by_id", "_entries")

    def __init__(self, entries: Iterable[LocaleEntry]) -> None:
        """Initialize catalog.

        Args:
            entries: Locale entries in priority order

        Raises:
            ValueError: If two entries share a LocaleId
        """
        entry_tuple = tuple(entries)
        by_id: dict[LocaleId, LocaleEntry] = {}
        for entry in entry_tuple:
            if entry.locale_id in by_id:
                msg = f"Duplicate catalog entry for locale '{entry.locale_id}'"
                raise ValueError(msg)
            by_id[entry.locale_id] = entry
        self._entries: tuple[LocaleEntry, ...] = entry_tuple
        self._by_id: MappingProxyType[LocaleId, LocaleEntry] = MappingProxyType(by_id)

    @classmethod
    def from_records(cls, records: Iterable[CatalogRecord]) -> LocaleCatalog:
        """Build a catalog from configuration tuples.

        Args:
            records: (language, region, display_name, presentation_tag) tuples

        Returns:
            New LocaleCatalog in record order

        Raises:
            ValueError: If a record has malformed subtags or duplicates another
        """
        return cls(
            LocaleEntry(LocaleId(language, region), display_name, tag)
            for language, region, display_name, tag in records
        )

    def entries(self) -> tuple[LocaleEntry, ...]:
        """Get all entries in insertion order."""
        return self._entries

    def find(self, locale_id: LocaleId) -> LocaleEntry | None:
        """Find the entry with exactly this (language, region).

        Args:
            locale_id: Identifier to look up

        Returns:
            Matching entry, or None (no fallback)
        """
        return self._by_id.get(locale_id)

    def identifiers(self) -> tuple[LocaleId, ...]:
        """Get all entry identifiers in insertion order."""
        return tuple(entry.locale_id for entry in self._entries)

    def __contains__(self, locale_id: object) -> bool:
        return locale_id in self._by_id

    def __iter__(self) -> Iterator[LocaleEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        tags = ", ".join(str(entry.locale_id) for entry in self._entries)
        return f"LocaleCatalog([{tags}])"


DEFAULT_CATALOG_RECORDS: tuple[CatalogRecord, ...] = (
    ("zh", "CN", "简体中文", "cn"),
    ("zh", "TW", "繁體中文", "tw"),
    ("en", "US", "English", "us"),
    ("ja", "JP", "日本語", "jp"),
    ("ko", "KR", "한국어", "kr"),
)

DEFAULT_CATALOG = LocaleCatalog.from_records(DEFAULT_CATALOG_RECORDS)
