"""Locale runtime package.

Provides bundles and their cache, per-locale format rules, the formatting
engine, plural selection and template rendering.

Python 3.13+.
"""

from .bundle import ResourceBundle
from .bundle_cache import BundleCache
from .format_engine import FormatEngine, RelativeTimeStrings
from .format_spec import FormatSpec, SymbolPosition, get_format_spec
from .names import localized_name
from .plural_rules import PluralSelector, select_plural_category
from .templates import (
    ParsedTemplate,
    PluralClause,
    parse_template,
    substitute,
    template_placeholders,
)

__all__ = [
    "BundleCache",
    "FormatEngine",
    "FormatSpec",
    "ParsedTemplate",
    "PluralClause",
    "PluralSelector",
    "RelativeTimeStrings",
    "ResourceBundle",
    "SymbolPosition",
    "get_format_spec",
    "localized_name",
    "parse_template",
    "select_plural_category",
    "substitute",
    "template_placeholders",
]
