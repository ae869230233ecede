"""Immutable per-locale resource bundle.

A ResourceBundle maps ASCII keys to template strings for one locale. It is
validated once when built from provider data and never mutated afterwards.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from localeengine.core.locale_id import LocaleId
from localeengine.diagnostics import BundleLoadError, Diagnostic, DiagnosticCode

__all__ = ["ResourceBundle"]

# Keys are ASCII identifiers, optionally dotted ("category.food").
_KEY_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]*(?:\.[A-Za-z0-9_\-]+)*")


class ResourceBundle(Mapping[str, str]):
    """Read-only key -> template mapping for one locale.

    ``locale_id`` is None for the empty bundle used when every provider
    link fails; callers then fall through to echoing the key.

    Example:
        >>> bundle = ResourceBundle.from_mapping(LocaleId("en", "US"), {"app.title": "Ledger"})
        >>> bundle.lookup("app.title")
        'Ledger'
        >>> bundle.lookup("missing") is None
        True
        >>> ResourceBundle.empty().is_empty
        True
    """

    __slots__ = ("_entries", "_locale_id")

    def __init__(self, locale_id: LocaleId | None, entries: Mapping[str, str]) -> None:
        """Initialize bundle without validation.

        Prefer from_mapping() for provider data.

        Args:
            locale_id: Locale the templates belong to (None for the empty bundle)
            entries: Key -> template mapping (copied)
        """
        self._locale_id = locale_id
        self._entries: MappingProxyType[str, str] = MappingProxyType(dict(entries))

    @classmethod
    def from_mapping(cls, locale_id: LocaleId, data: object) -> ResourceBundle:
        """Validate provider data and build a bundle.

        Args:
            locale_id: Locale the data was loaded for
            data: Provider result; must be a mapping of str -> str

        Returns:
            New ResourceBundle

        Raises:
            BundleLoadError: If data is not a mapping, or a key or value is invalid
        """
        if not isinstance(data, Mapping):
            diagnostic = Diagnostic(
                code=DiagnosticCode.BUNDLE_INVALID,
                message=f"Bundle must be a mapping, got {type(data).__name__}",
                locale_code=str(locale_id),
            )
            raise BundleLoadError(diagnostic)

        for key, value in data.items():
            if not isinstance(key, str) or not key.isascii() or not _KEY_RE.fullmatch(key):
                diagnostic = Diagnostic(
                    code=DiagnosticCode.BUNDLE_INVALID,
                    message=f"Invalid bundle key {key!r}",
                    locale_code=str(locale_id),
                )
                raise BundleLoadError(diagnostic)
            if not isinstance(value, str):
                diagnostic = Diagnostic(
                    code=DiagnosticCode.BUNDLE_INVALID,
                    message=f"Template must be a string, got {type(value).__name__}",
                    locale_code=str(locale_id),
                    key=key,
                )
                raise BundleLoadError(diagnostic)

        return cls(locale_id, data)

    @classmethod
    def empty(cls, locale_id: LocaleId | None = None) -> ResourceBundle:
        """Create a bundle with no entries."""
        return cls(locale_id, {})

    @property
    def locale_id(self) -> LocaleId | None:
        """Locale the templates belong to."""
        return self._locale_id

    @property
    def is_empty(self) -> bool:
        """Check if bundle has no entries."""
        return not self._entries

    def lookup(self, key: str) -> str | None:
        """Get the template for a key, with no fallback.

        Args:
            key: Translation key

        Returns:
            Template string, or None if absent
        """
        return self._entries.get(key)

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ResourceBundle(locale={self._locale_id}, entries={len(self._entries)})"
