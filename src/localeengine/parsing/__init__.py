"""Bi-directional localization: parse locale-aware display strings back to Python types.

- Functions NEVER raise exceptions - failures return None
- Inverse of the FormatEngine currency formatting

Public API:
    parse_currency - Returns Decimal | None

Example:
    >>> from localeengine.parsing import parse_currency
    >>> parse_currency("$1,234.50", "en_US", currency_symbol="$")
    Decimal('1234.50')

Python 3.13+. Uses Babel CLDR data for decimal marks.
"""

from .currency import parse_currency

__all__ = ["parse_currency"]
