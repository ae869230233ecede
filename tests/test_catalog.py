"""Tests for LocaleCatalog and LocaleEntry."""

from __future__ import annotations

import pytest

from localeengine.catalog import DEFAULT_CATALOG, LocaleCatalog, LocaleEntry
from localeengine.core import LocaleId


class TestDefaultCatalog:
    """Shipped catalog contents."""

    def test_five_entries_in_order(self) -> None:
        """Shipped locales keep configuration order."""
        assert [str(i) for i in DEFAULT_CATALOG.identifiers()] == [
            "zh_CN",
            "zh_TW",
            "en_US",
            "ja_JP",
            "ko_KR",
        ]

    def test_entries_carry_presentation_data(self) -> None:
        """Display names and presentation tags are populated."""
        entry = DEFAULT_CATALOG.find(LocaleId("zh", "TW"))
        assert entry is not None
        assert entry.display_name == "繁體中文"
        assert entry.presentation_tag == "tw"
        assert entry.language == "zh"
        assert entry.region == "TW"


class TestLocaleCatalog:
    """Catalog lookup and construction."""

    def test_find_is_exact_only(self) -> None:
        """find() never falls back to language-only matches."""
        assert DEFAULT_CATALOG.find(LocaleId("en", "GB")) is None
        assert DEFAULT_CATALOG.find(LocaleId("en")) is None
        assert DEFAULT_CATALOG.find(LocaleId("en", "US")) is not None

    def test_duplicate_entries_rejected(self) -> None:
        """Two entries with one identifier raise ValueError."""
        with pytest.raises(ValueError, match="Duplicate"):
            LocaleCatalog.from_records([("en", "US", "English", ""), ("EN", "us", "Again", "")])

    def test_container_protocol(self) -> None:
        """len, iteration and membership reflect the entries."""
        catalog = LocaleCatalog([LocaleEntry(LocaleId("fr", "FR"), "Français")])
        assert len(catalog) == 1
        assert LocaleId("fr", "FR") in catalog
        assert LocaleId("fr") not in catalog
        assert [entry.display_name for entry in catalog] == ["Français"]
        assert repr(catalog) == "LocaleCatalog([fr_FR])"

    def test_from_records_rejects_bad_subtags(self) -> None:
        """Malformed configuration raises ValueError."""
        with pytest.raises(ValueError):
            LocaleCatalog.from_records([("english", "USA", "English", "us")])

    def test_empty_catalog(self) -> None:
        """An empty catalog is allowed."""
        catalog = LocaleCatalog([])
        assert catalog.entries() == ()
        assert catalog.find(LocaleId("zh", "CN")) is None
