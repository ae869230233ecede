"""Locale-bound formatting of numbers, currency, dates and relative time.

This module provides locale-aware formatting without global state mutation.
Uses Babel for CLDR-compliant number and date rendering, driven by the
per-locale FormatSpec.

Architecture:
    - FormatEngine: Immutable formatter bound to one LocaleId
    - FormatSpec decides symbol, placement, digits and date/time patterns
    - Babel renders digits and separators (thread-safe, CLDR-based)
    - Instances are cached per LocaleId in a bounded LRU

Failure policy:
    Formatting never raises for bad values. A value Babel cannot render is
    logged and returned as ``str(value)``; currency parsing returns None.

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from threading import RLock
from typing import ClassVar

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from localeengine.constants import (
    MAX_ENGINE_CACHE_SIZE,
    MAX_FRACTION_DIGITS,
    RELATIVE_DAYS_CUTOFF,
)
from localeengine.core.locale_id import LocaleId, fallback_chain
from localeengine.enums import TransactionKind
from localeengine.locale_utils import get_babel_locale
from localeengine.parsing.currency import parse_currency
from localeengine.runtime.format_spec import FormatSpec, SymbolPosition, get_format_spec
from localeengine.runtime.templates import substitute

__all__ = ["FormatEngine", "RelativeTimeStrings"]

logger = logging.getLogger(__name__)

_FALLBACK_BABEL_LOCALE = "en_US"

_SECONDS_PER_MINUTE = 60
_SECONDS_PER_HOUR = 3600
_SECONDS_PER_DAY = 86400

# Errors Babel and Decimal raise for values they cannot render
_FORMAT_ERRORS = (ArithmeticError, ValueError, TypeError, AttributeError, KeyError, OverflowError)


@dataclass(frozen=True, slots=True)
class RelativeTimeStrings:
    """Relative-time wording for one language; ``{count}`` is a whole number."""

    just_now: str
    minutes_ago: str
    hours_ago: str
    days_ago: str


# Keyed by locale string; looked up through the fallback chain with "en" last.
_RELATIVE_TIME: dict[str, RelativeTimeStrings] = {
    "en": RelativeTimeStrings(
        "just now", "{count} minutes ago", "{count} hours ago", "{count} days ago"
    ),
    "zh": RelativeTimeStrings("刚刚", "{count}分钟前", "{count}小时前", "{count}天前"),
    "zh_TW": RelativeTimeStrings("剛剛", "{count}分鐘前", "{count}小時前", "{count}天前"),
    "ja": RelativeTimeStrings("たった今", "{count}分前", "{count}時間前", "{count}日前"),
    "ko": RelativeTimeStrings("방금 전", "{count}분 전", "{count}시간 전", "{count}일 전"),
}
_RELATIVE_TIME_DEFAULT = LocaleId("en")


def _to_decimal(value: int | float | Decimal) -> Decimal:
    if isinstance(value, bool):
        msg = f"Expected a number, got {type(value).__name__}"
        raise TypeError(msg)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        # Shortest repr: 0.125 rounds as written
        result = Decimal(str(value))
    else:
        result = Decimal(value)
    if not result.is_finite():
        msg = f"Cannot format non-finite amount {value!r}"
        raise ValueError(msg)
    return result


def _quantum(digits: int) -> Decimal:
    return Decimal(1).scaleb(-digits)


def _to_datetime(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


@dataclass(frozen=True, slots=True)
class FormatEngine:
    """Immutable locale-bound formatter.

    Use FormatEngine.create() to construct instances; it derives the
    FormatSpec and resolves the Babel locale once.

    Examples:
        >>> engine = FormatEngine.create(LocaleId("en", "US"))
        >>> engine.format_number(1234.5)
        '1,234.5'
        >>> engine.format_signed_amount(100, TransactionKind.EXPENSE)
        '-$100.00'
        >>> FormatEngine.create(LocaleId("ja", "JP")).format_currency(1234.56)
        '¥1,235'

    Thread Safety:
        FormatEngine is immutable and thread-safe. Cache operations are
        protected by RLock.
    """

    # LRU of engines by locale (ClassVar is excluded from dataclass fields)
    _cache: ClassVar[OrderedDict[LocaleId, FormatEngine]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale_id: LocaleId
    spec: FormatSpec
    _babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the engine cache (tests, memory pressure)."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached engines."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale_id: LocaleId) -> FormatEngine:
        """Get the engine for a locale, creating it on first use.

        Locales Babel does not know still get an engine: digits and
        separators are rendered with en_US data and ``is_fallback`` is set.

        Args:
            locale_id: Locale to format for

        Returns:
            FormatEngine (same instance for repeated calls while cached)
        """
        with cls._cache_lock:
            if locale_id in cls._cache:
                cls._cache.move_to_end(locale_id)
                return cls._cache[locale_id]

        used_fallback = False
        try:
            babel_locale = get_babel_locale(str(locale_id))
        except (UnknownLocaleError, ValueError) as e:
            logger.warning(
                "Unknown locale '%s': %s. Rendering digits with %s",
                locale_id,
                e,
                _FALLBACK_BABEL_LOCALE,
            )
            babel_locale = get_babel_locale(_FALLBACK_BABEL_LOCALE)
            used_fallback = True

        engine = cls(
            locale_id=locale_id,
            spec=get_format_spec(locale_id),
            _babel_locale=babel_locale,
            is_fallback=used_fallback,
        )

        with cls._cache_lock:
            if locale_id in cls._cache:
                return cls._cache[locale_id]
            if len(cls._cache) >= MAX_ENGINE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[locale_id] = engine
            return engine

    @property
    def babel_locale(self) -> Locale:
        """Babel locale used for digits and separators."""
        return self._babel_locale

    def format_number(self, value: int | float | Decimal) -> str:
        """Format a number with grouping and up to two fractional digits.

        Rounds half-up; trailing fractional zeros are trimmed.

        Examples:
            >>> engine = FormatEngine.create(LocaleId("zh", "CN"))
            >>> engine.format_number(1234567.891)
            '1,234,567.89'
            >>> engine.format_number(12.50)
            '12.5'
        """
        try:
            amount = _to_decimal(value).quantize(
                _quantum(MAX_FRACTION_DIGITS), rounding=ROUND_HALF_UP
            )
            if amount.is_zero():
                # Babel signs "-0.00"; zero has no sign
                amount = abs(amount)
            pattern = "#,##0." + "#" * MAX_FRACTION_DIGITS
            return str(
                babel_numbers.format_decimal(amount, format=pattern, locale=self._babel_locale)
            )
        except _FORMAT_ERRORS as e:
            logger.warning("Number formatting failed for %r (%s): %s", value, self.locale_id, e)
            return str(value)

    def format_currency(self, value: int | float | Decimal) -> str:
        """Format the absolute value of an amount with the locale's currency symbol.

        The amount is rounded half-up to the currency's fractional digits
        and always shows exactly that many.

        Examples:
            >>> FormatEngine.create(LocaleId("zh", "CN")).format_currency(-1234.5)
            '¥1,234.50'
            >>> FormatEngine.create(LocaleId("ko", "KR")).format_currency(5000)
            '₩5,000'
        """
        spec = self.spec
        try:
            amount = abs(_to_decimal(value)).quantize(
                _quantum(spec.currency_digits), rounding=ROUND_HALF_UP
            )
            pattern = "#,##0" + ("." + "0" * spec.currency_digits if spec.currency_digits else "")
            number = str(
                babel_numbers.format_decimal(amount, format=pattern, locale=self._babel_locale)
            )
        except _FORMAT_ERRORS as e:
            logger.warning("Currency formatting failed for %r (%s): %s", value, self.locale_id, e)
            return str(value)

        if spec.symbol_position is SymbolPosition.SUFFIX:
            return f"{number} {spec.currency_symbol}"
        return f"{spec.currency_symbol}{number}"

    def format_signed_amount(
        self, value: int | float | Decimal, kind: TransactionKind | str
    ) -> str:
        """Format a ledger amount with the sign implied by its transaction kind.

        Income gets "+", expense gets "-", transfer is unsigned. The sign of
        ``value`` itself is ignored.

        Args:
            value: Amount
            kind: Transaction kind (or its string value)

        Returns:
            Signed currency string

        Raises:
            ValueError: If kind is not a TransactionKind value
        """
        match TransactionKind(kind):
            case TransactionKind.INCOME:
                sign = "+"
            case TransactionKind.EXPENSE:
                sign = "-"
            case TransactionKind.TRANSFER:
                sign = ""
        return sign + self.format_currency(value)

    def format_date(self, value: datetime | date) -> str:
        """Format the calendar date of an instant.

        Aware datetimes keep their own wall time; naive ones are taken as-is.

        Examples:
            >>> from datetime import date
            >>> FormatEngine.create(LocaleId("ja", "JP")).format_date(date(2024, 3, 5))
            '2024年3月5日'
            >>> FormatEngine.create(LocaleId("en", "US")).format_date(date(2024, 3, 5))
            '3/5/2024'
        """
        return self._format_pattern(value, self.spec.date_pattern)

    def format_time(self, value: datetime) -> str:
        """Format hour and minute, 24-hour and zero-padded."""
        return self._format_pattern(value, self.spec.time_pattern)

    def format_datetime(self, value: datetime) -> str:
        """Format date followed by time."""
        return self._format_pattern(value, self.spec.datetime_pattern)

    def format_relative_time(self, instant: datetime, now: datetime | None = None) -> str:
        """Describe how long ago an instant was.

        Buckets use strict thresholds, so a boundary belongs to the coarser
        bucket: exactly 60 minutes is "1 hours ago". Deltas of 30 days or
        more fall back to format_date(). Future instants count as "just now".

        Args:
            instant: Past instant (naive values are taken as UTC)
            now: Reference instant (default: current UTC time)

        Returns:
            Relative description in the locale's language

        Example:
            >>> from datetime import datetime, timedelta, UTC
            >>> now = datetime(2024, 3, 5, 12, 0, tzinfo=UTC)
            >>> engine = FormatEngine.create(LocaleId("en", "US"))
            >>> engine.format_relative_time(now - timedelta(minutes=60), now)
            '1 hours ago'
        """
        reference = _as_utc(now) if now is not None else datetime.now(UTC)
        seconds = max((reference - _as_utc(instant)).total_seconds(), 0.0)
        strings = self.relative_time_strings

        if seconds < _SECONDS_PER_MINUTE:
            return strings.just_now
        if seconds < _SECONDS_PER_HOUR:
            return substitute(strings.minutes_ago, {"count": int(seconds // _SECONDS_PER_MINUTE)})
        if seconds < _SECONDS_PER_DAY:
            return substitute(strings.hours_ago, {"count": int(seconds // _SECONDS_PER_HOUR)})
        if seconds < RELATIVE_DAYS_CUTOFF * _SECONDS_PER_DAY:
            return substitute(strings.days_ago, {"count": int(seconds // _SECONDS_PER_DAY)})
        return self.format_date(instant)

    @property
    def relative_time_strings(self) -> RelativeTimeStrings:
        """Relative-time wording for this locale (English when unlisted)."""
        for link in fallback_chain(self.locale_id, _RELATIVE_TIME_DEFAULT):
            strings = _RELATIVE_TIME.get(str(link))
            if strings is not None:
                return strings
        return _RELATIVE_TIME[str(_RELATIVE_TIME_DEFAULT)]

    def parse_currency(self, text: str) -> Decimal | None:
        """Parse a currency string formatted for this locale.

        Examples:
            >>> FormatEngine.create(LocaleId("zh", "CN")).parse_currency("¥1,234.56")
            Decimal('1234.56')
            >>> FormatEngine.create(LocaleId("zh", "CN")).parse_currency("garbage") is None
            True
        """
        return parse_currency(
            text,
            str(self._babel_locale),
            currency_symbol=self.spec.currency_symbol,
            group_separator=self.spec.group_separator,
        )

    def _format_pattern(self, value: datetime | date, pattern: str) -> str:
        try:
            return str(
                babel_dates.format_datetime(
                    _to_datetime(value), format=pattern, locale=self._babel_locale
                )
            )
        except _FORMAT_ERRORS as e:
            logger.warning("Date formatting failed for %r (%s): %s", value, self.locale_id, e)
            return str(value)
