"""Tests for plural category selection and plural template rendering."""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from localeengine.constants import NO_PLURAL_LANGUAGES
from localeengine.core import LocaleId
from localeengine.enums import PluralCategory
from localeengine.runtime import FormatEngine, PluralSelector, select_plural_category

EN_TEMPLATE = "{count, plural, =0{No transactions} one{# transaction} other{# transactions}}"
ZH_TEMPLATE = "{count, plural, =0{暂无交易} other{共 # 笔交易}}"


class TestSelectPluralCategory:
    """zero/one/other selection."""

    @pytest.mark.parametrize(
        ("count", "language", "expected"),
        [
            (0, "en", PluralCategory.ZERO),
            (1, "en", PluralCategory.ONE),
            (1.0, "en", PluralCategory.ONE),
            (Decimal(1), "en", PluralCategory.ONE),
            (2, "en", PluralCategory.OTHER),
            (1.5, "en", PluralCategory.OTHER),
            (0, "zh", PluralCategory.OTHER),
            (1, "ja", PluralCategory.OTHER),
            (1, "KO", PluralCategory.OTHER),
        ],
    )
    def test_examples(
        self, count: int | float | Decimal, language: str, expected: PluralCategory
    ) -> None:
        """Fixed examples across plural and no-plural languages."""
        assert select_plural_category(count, language) is expected

    @given(st.sampled_from(sorted(NO_PLURAL_LANGUAGES)), st.integers(min_value=0, max_value=10**9))
    def test_no_plural_languages_always_other(self, language: str, count: int) -> None:
        """Languages without plural forms never leave 'other'."""
        assert select_plural_category(count, language) is PluralCategory.OTHER

    def test_custom_language_set(self) -> None:
        """The no-plural set is configurable."""
        assert select_plural_category(1, "en", frozenset({"en"})) is PluralCategory.OTHER


class TestPluralSelectorRender:
    """Template rendering through PluralSelector."""

    def test_english_counts(self) -> None:
        """=0, one and other clauses each apply."""
        selector = PluralSelector(LocaleId("en", "US"))
        assert selector.render(EN_TEMPLATE, count=0) == "No transactions"
        assert selector.render(EN_TEMPLATE, count=1) == "1 transaction"
        assert selector.render(EN_TEMPLATE, count=7) == "7 transactions"

    def test_chinese_counts(self) -> None:
        """Chinese uses =0 for zero and other for everything else."""
        selector = PluralSelector(LocaleId("zh", "CN"))
        assert selector.render(ZH_TEMPLATE, count=0) == "暂无交易"
        assert selector.render(ZH_TEMPLATE, count=1) == "共 1 笔交易"
        assert selector.render(ZH_TEMPLATE, count=5) == "共 5 笔交易"

    def test_count_formatter_groups_digits(self) -> None:
        """A FormatEngine formatter renders # with grouping."""
        locale_id = LocaleId("en", "US")
        engine = FormatEngine.create(locale_id)
        selector = PluralSelector(locale_id, count_formatter=engine.format_number)
        assert selector.render(EN_TEMPLATE, count=1234) == "1,234 transactions"

    def test_float_count_renders_without_fraction(self) -> None:
        """Integral floats render like integers by default."""
        selector = PluralSelector(LocaleId("en", "US"))
        assert selector.render(EN_TEMPLATE, count=3.0) == "3 transactions"

    def test_count_taken_from_values(self) -> None:
        """Without count, the block variable's value is used."""
        selector = PluralSelector(LocaleId("en", "US"))
        template = "{n, plural, one{# account} other{# accounts}}"
        assert selector.render(template, values={"n": 1}) == "1 account"

    def test_placeholders_around_plural(self) -> None:
        """Placeholders inside and outside blocks are substituted."""
        selector = PluralSelector(LocaleId("en", "US"))
        template = "{name} has {count, plural, one{# card in {bank}} other{# cards in {bank}}}"
        result = selector.render(template, count=2, values={"name": "Ana", "bank": "ACME"})
        assert result == "Ana has 2 cards in ACME"

    def test_count_placeholder(self) -> None:
        """{count} outside a block is the count."""
        selector = PluralSelector(LocaleId("ja", "JP"))
        assert selector.render("{count}件", count=4) == "4件"

    def test_plain_template(self) -> None:
        """Templates without blocks only get substitution."""
        selector = PluralSelector(LocaleId("en", "US"))
        assert selector.render("Hi {name}", values={"name": "Bo"}) == "Hi Bo"

    def test_missing_category_falls_back_to_other(self, caplog: pytest.LogCaptureFixture) -> None:
        """A missing 'one' clause uses 'other' and logs a warning."""
        selector = PluralSelector(LocaleId("en", "US"))
        with caplog.at_level(logging.WARNING, logger="localeengine.runtime.plural_rules"):
            result = selector.render("{count, plural, other{# items}}", count=1)
        assert result == "1 items"
        assert "using 'other'" in caplog.text

    def test_exact_match_does_not_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """=0 covering zero is not a fallback."""
        selector = PluralSelector(LocaleId("en", "US"))
        with caplog.at_level(logging.WARNING, logger="localeengine.runtime.plural_rules"):
            selector.render(EN_TEMPLATE, count=0)
        assert caplog.text == ""

    def test_missing_other_returns_raw_template(self, caplog: pytest.LogCaptureFixture) -> None:
        """Neither category nor other: the raw template comes back."""
        selector = PluralSelector(LocaleId("en", "US"))
        template = "{count, plural, one{# item}}"
        with caplog.at_level(logging.WARNING, logger="localeengine.runtime.plural_rules"):
            assert selector.render(template, count=5) == template
        assert "returning raw template" in caplog.text

    def test_malformed_template_is_substituted_only(self, caplog: pytest.LogCaptureFixture) -> None:
        """Malformed blocks are left alone, plain placeholders still filled."""
        selector = PluralSelector(LocaleId("en", "US"))
        template = "{name}: {count, plural, other{oops}"
        with caplog.at_level(logging.WARNING, logger="localeengine.runtime.plural_rules"):
            result = selector.render(template, count=2, values={"name": "Ana"})
        assert result == "Ana: {count, plural, other{oops}"
        assert "Malformed" in caplog.text

    @given(st.integers(min_value=2, max_value=10**6))
    def test_english_other_for_larger_counts(self, count: int) -> None:
        """Counts above one use the other clause."""
        selector = PluralSelector(LocaleId("en", "US"))
        assert selector.render(EN_TEMPLATE, count=count) == f"{count} transactions"

    def test_repr(self) -> None:
        """repr names the locale."""
        assert repr(PluralSelector(LocaleId("ko", "KR"))) == "PluralSelector(locale=ko_KR)"
