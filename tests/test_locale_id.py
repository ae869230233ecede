"""Tests for LocaleId parsing, normalization and fallback chains."""

from __future__ import annotations

import pytest
from hypothesis import example, given
from hypothesis import strategies as st

from localeengine.core import LocaleId, detect_device_locale, fallback_chain
from tests.strategies import locale_ids, regional_ids


class TestLocaleIdConstruction:
    """LocaleId normalization and validation."""

    def test_case_is_normalized(self) -> None:
        """Language is lower-cased and region upper-cased."""
        locale_id = LocaleId("ZH", "cn")
        assert locale_id.language == "zh"
        assert locale_id.region == "CN"

    def test_equality_is_case_insensitive_on_input(self) -> None:
        """Identifiers built from differently cased input compare equal."""
        assert LocaleId("En", "us") == LocaleId("en", "US")
        assert hash(LocaleId("En", "us")) == hash(LocaleId("en", "US"))

    def test_empty_region_becomes_none(self) -> None:
        """An empty region string means language-only."""
        assert LocaleId("en", "").region is None

    def test_numeric_region_accepted(self) -> None:
        """UN M.49 numeric regions are valid."""
        assert LocaleId("es", "419").region == "419"

    @pytest.mark.parametrize("language", ["", "e", "e1", "english-long-name"])
    def test_invalid_language_rejected(self, language: str) -> None:
        """Malformed language subtags raise ValueError."""
        with pytest.raises(ValueError, match="language"):
            LocaleId(language, "US")

    @pytest.mark.parametrize("region", ["U", "USA", "1A"])
    def test_invalid_region_rejected(self, region: str) -> None:
        """Malformed region subtags raise ValueError."""
        with pytest.raises(ValueError, match="region"):
            LocaleId("en", region)

    def test_str_forms(self) -> None:
        """str() gives POSIX form and to_bcp47() gives hyphenated form."""
        assert str(LocaleId("zh", "TW")) == "zh_TW"
        assert str(LocaleId("ja")) == "ja"
        assert LocaleId("zh", "TW").to_bcp47() == "zh-TW"
        assert LocaleId("ja").to_bcp47() == "ja"

    def test_language_only(self) -> None:
        """language_only() drops the region and is idempotent."""
        assert LocaleId("en", "GB").language_only() == LocaleId("en")
        assert LocaleId("en").language_only() == LocaleId("en")
        assert not LocaleId("en").has_region


class TestLocaleIdParse:
    """LocaleId.parse and try_parse."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("zh_CN", LocaleId("zh", "CN")),
            ("zh-cn", LocaleId("zh", "CN")),
            ("en", LocaleId("en")),
            ("ko_KR.UTF-8", LocaleId("ko", "KR")),
            ("de_DE@euro", LocaleId("de", "DE")),
            ("zh_Hant_TW", LocaleId("zh", "TW")),
            ("zh-Hans", LocaleId("zh")),
        ],
    )
    def test_parse_accepts_common_forms(self, text: str, expected: LocaleId) -> None:
        """POSIX, BCP-47, encoding suffixes and script subtags parse."""
        assert LocaleId.parse(text) == expected

    @pytest.mark.parametrize("text", ["", "_", "en_US_POSIX_extra", "1234", "en__US"])
    def test_parse_rejects_malformed(self, text: str) -> None:
        """Malformed strings raise ValueError."""
        with pytest.raises(ValueError):
            LocaleId.parse(text)

    def test_parse_rejects_non_string(self) -> None:
        """Non-string input raises TypeError."""
        with pytest.raises(TypeError):
            LocaleId.parse(42)  # type: ignore[arg-type]

    def test_try_parse_returns_none(self) -> None:
        """try_parse() returns None instead of raising."""
        assert LocaleId.try_parse(None) is None
        assert LocaleId.try_parse("not a locale") is None
        assert LocaleId.try_parse("ja-JP") == LocaleId("ja", "JP")

    @given(locale_ids())
    def test_str_parse_roundtrip(self, locale_id: LocaleId) -> None:
        """Parsing str(locale_id) yields the same identifier."""
        assert LocaleId.parse(str(locale_id)) == locale_id
        assert LocaleId.parse(locale_id.to_bcp47()) == locale_id


class TestFallbackChain:
    """fallback_chain ordering and deduplication."""

    def test_full_chain(self) -> None:
        """Exact, language-only, default."""
        chain = fallback_chain(LocaleId("en", "GB"), LocaleId("zh", "CN"))
        assert chain == (LocaleId("en", "GB"), LocaleId("en"), LocaleId("zh", "CN"))

    def test_chain_without_default(self) -> None:
        """Without a default the chain stops at language-only."""
        assert fallback_chain(LocaleId("en", "GB")) == (LocaleId("en", "GB"), LocaleId("en"))

    def test_language_only_locale_deduplicates(self) -> None:
        """A language-only locale appears once."""
        assert fallback_chain(LocaleId("en"), LocaleId("zh", "CN")) == (
            LocaleId("en"),
            LocaleId("zh", "CN"),
        )

    def test_default_locale_deduplicates(self) -> None:
        """Requesting the default does not repeat it."""
        assert fallback_chain(LocaleId("zh", "CN"), LocaleId("zh", "CN")) == (
            LocaleId("zh", "CN"),
            LocaleId("zh"),
        )

    @given(regional_ids(), regional_ids())
    @example(LocaleId("zh", "CN"), LocaleId("zh", "CN"))
    def test_chain_properties(self, locale_id: LocaleId, default: LocaleId) -> None:
        """Chain starts with the request, ends with the default, has no duplicates."""
        chain = fallback_chain(locale_id, default)
        assert chain[0] == locale_id
        assert default in chain
        assert len(set(chain)) == len(chain)
        assert 2 <= len(chain) <= 3


class TestDetectDeviceLocale:
    """detect_device_locale reads the environment."""

    def test_reads_lang(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LANG is used when the OS locale is not set."""
        monkeypatch.setattr("locale.getlocale", lambda: (None, None))
        monkeypatch.delenv("LC_ALL", raising=False)
        monkeypatch.delenv("LC_MESSAGES", raising=False)
        monkeypatch.setenv("LANG", "ja_JP.UTF-8")
        assert detect_device_locale() == LocaleId("ja", "JP")

    @pytest.mark.parametrize("value", ["C", "POSIX", "C.UTF-8"])
    def test_pseudo_locales_are_none(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        """C and POSIX mean no device locale."""
        monkeypatch.setattr("locale.getlocale", lambda: (None, None))
        monkeypatch.delenv("LC_ALL", raising=False)
        monkeypatch.delenv("LC_MESSAGES", raising=False)
        monkeypatch.setenv("LANG", value)
        assert detect_device_locale() is None

    @given(st.sampled_from(["zh_CN", "en_US", "ko_KR"]))
    def test_lc_all_wins(self, value: str) -> None:
        """LC_ALL overrides LANG."""
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr("locale.getlocale", lambda: (None, None))
            mp.setenv("LC_ALL", value)
            mp.setenv("LANG", "fr_FR.UTF-8")
            assert detect_device_locale() == LocaleId.parse(value)
