"""Currency amount parsing with locale awareness.

API: parse_currency() returns Decimal | None.
Functions NEVER raise exceptions - failures return None and are logged at
debug level.

Thread-safe. Uses Babel for locale-aware decimal parsing.

Python 3.13+.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from babel import UnknownLocaleError
from babel.numbers import NumberFormatError
from babel.numbers import parse_decimal as babel_parse_decimal

from localeengine.locale_utils import get_babel_locale

__all__ = ["parse_currency"]

logger = logging.getLogger(__name__)

# Whitespace variants that appear around symbols in CLDR output
_SPACES = (" ", "\xa0", " ", " ")


def parse_currency(
    value: str,
    locale_code: str,
    *,
    currency_symbol: str,
    group_separator: str = ",",
) -> Decimal | None:
    """Parse a locale-formatted currency string to Decimal.

    Strips every occurrence of the currency symbol and the grouping
    separator, trims whitespace, then parses the remainder with the
    locale's decimal mark.

    Args:
        value: Display string (e.g., "¥1,234.56", "-$100.00")
        locale_code: Locale whose decimal mark applies (e.g., "zh_CN")
        currency_symbol: Symbol to strip (e.g., "¥", "NT$")
        group_separator: Grouping separator to strip (default: ",")

    Returns:
        Finite Decimal, or None if the text is not an amount

    Examples:
        >>> parse_currency("¥1,234.56", "zh_CN", currency_symbol="¥")
        Decimal('1234.56')
        >>> parse_currency("NT$ 1,000", "zh_TW", currency_symbol="NT$")
        Decimal('1000')
        >>> parse_currency("garbage", "en_US", currency_symbol="$") is None
        True
    """
    if not isinstance(value, str):
        return None

    text = value.replace(currency_symbol, "") if currency_symbol else value
    if group_separator:
        text = text.replace(group_separator, "")
    for space in _SPACES:
        text = text.replace(space, "")
    text = text.strip()
    if not text:
        logger.debug("Currency text %r is empty after stripping symbol", value)
        return None

    try:
        result = babel_parse_decimal(text, locale=get_babel_locale(locale_code))
    except (NumberFormatError, InvalidOperation, ValueError, UnknownLocaleError) as e:
        logger.debug("Currency text %r not parseable for %s: %s", value, locale_code, e)
        return None

    if not result.is_finite():
        logger.debug("Currency text %r parsed to non-finite %s", value, result)
        return None
    return result
