"""Plural category selection and plural template rendering.

Only the zero/one/other categories are modeled. Languages without a
singular/plural distinction always select "other"; every other language
selects "zero" for 0, "one" for 1 and "other" otherwise.

Rendering never raises: a missing category clause falls back to "other",
a missing "other" returns the raw template, and both are logged as
data-quality warnings.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import TypeAlias

from localeengine.constants import NO_PLURAL_LANGUAGES
from localeengine.core.locale_id import LocaleId
from localeengine.enums import PluralCategory
from localeengine.runtime.templates import parse_template, substitute

__all__ = ["PluralSelector", "select_plural_category"]

logger = logging.getLogger(__name__)

Count: TypeAlias = int | float | Decimal


def select_plural_category(
    count: Count,
    language: str,
    no_plural_languages: frozenset[str] = NO_PLURAL_LANGUAGES,
) -> PluralCategory:
    """Select the plural category of a count for a language.

    Args:
        count: Number to categorize
        language: Language subtag (e.g., "en", "zh")
        no_plural_languages: Languages that always select "other"

    Returns:
        PluralCategory.ZERO, ONE or OTHER

    Examples:
        >>> select_plural_category(0, "en")
        <PluralCategory.ZERO: 'zero'>
        >>> select_plural_category(1, "en")
        <PluralCategory.ONE: 'one'>
        >>> select_plural_category(0, "zh")
        <PluralCategory.OTHER: 'other'>
    """
    if language.lower() in no_plural_languages:
        return PluralCategory.OTHER
    if count == 0:
        return PluralCategory.ZERO
    if count == 1:
        return PluralCategory.ONE
    return PluralCategory.OTHER


def _as_count(value: object) -> Count | None:
    # bool is an int subclass but never a count
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return value
    return None


def _count_text(count: Count) -> str:
    if isinstance(count, float) and count.is_integer():
        return str(int(count))
    return str(count)


class PluralSelector:
    """Plural selection and template rendering bound to one locale.

    Instances are immutable and safe to share between threads.

    Example:
        >>> selector = PluralSelector(LocaleId("en", "US"))
        >>> template = "{count, plural, =0{No items} one{# item} other{# items}}"
        >>> selector.render(template, count=1)
        '1 item'
        >>> selector.render(template, count=5)
        '5 items'
    """

    __slots__ = ("_count_formatter", "_locale_id", "_no_plural_languages")

    def __init__(
        self,
        locale_id: LocaleId,
        *,
        no_plural_languages: frozenset[str] = NO_PLURAL_LANGUAGES,
        count_formatter: Callable[[Count], str] | None = None,
    ) -> None:
        """Initialize selector.

        Args:
            locale_id: Locale whose language decides the plural rule
            no_plural_languages: Languages that always select "other"
            count_formatter: Renders the count for ``#`` and ``{count}``
                (default: plain digits; a FormatEngine's format_number
                gives locale grouping)
        """
        self._locale_id = locale_id
        self._no_plural_languages = no_plural_languages
        self._count_formatter = count_formatter or _count_text

    @property
    def locale_id(self) -> LocaleId:
        """Locale this selector renders for."""
        return self._locale_id

    def select_plural(self, count: Count) -> PluralCategory:
        """Select the plural category of a count for this locale."""
        return select_plural_category(
            count, self._locale_id.language, self._no_plural_languages
        )

    def render(
        self,
        template: str,
        count: Count | None = None,
        values: Mapping[str, object] | None = None,
    ) -> str:
        """Render a template with plural selection and placeholder substitution.

        Each plural block takes its count from ``count`` or, if not given,
        from the value named by the block's variable.

        Args:
            template: Template text
            count: Count for plural blocks (also available as ``{count}``)
            values: Other placeholder values

        Returns:
            Rendered text; the raw template when a plural block has neither
            the selected clause nor "other"
        """
        merged: dict[str, object] = dict(values or {})
        if count is not None:
            merged.setdefault("count", count)

        parsed = parse_template(template)
        if parsed.malformed:
            logger.warning(
                "Malformed plural block in template for %s: %r", self._locale_id, template
            )
            return substitute(template, merged, self._format_value)
        if not parsed.clauses:
            return substitute(template, merged, self._format_value)

        pieces: list[str] = []
        pos = 0
        for clause in parsed.clauses:
            clause_count = count if count is not None else _as_count(merged.get(clause.variable))
            category = (
                self.select_plural(clause_count)
                if clause_count is not None
                else PluralCategory.OTHER
            )
            text = clause.select(clause_count, category)
            if text is None:
                logger.warning(
                    "Plural block for '%s' has no '%s' or 'other' clause (%s); "
                    "returning raw template",
                    clause.variable,
                    category,
                    self._locale_id,
                )
                return template
            if category not in clause.options and not _has_exact(clause.options, clause_count):
                logger.warning(
                    "Plural block for '%s' has no '%s' clause (%s); using 'other'",
                    clause.variable,
                    category,
                    self._locale_id,
                )
            if clause_count is not None:
                text = text.replace("#", self._count_formatter(clause_count))
                merged.setdefault(clause.variable, clause_count)
            pieces.append(template[pos : clause.start])
            pieces.append(text)
            pos = clause.end
        pieces.append(template[pos:])
        return substitute("".join(pieces), merged, self._format_value)

    def _format_value(self, value: object) -> str:
        count = _as_count(value)
        if count is not None:
            return self._count_formatter(count)
        return str(value)

    def __repr__(self) -> str:
        return f"PluralSelector(locale={self._locale_id})"


def _has_exact(options: Mapping[str, str], count: Count | None) -> bool:
    if count is None or not float(count).is_integer():
        return False
    return f"={int(count)}" in options
