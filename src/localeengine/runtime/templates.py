"""Template parsing and placeholder substitution.

Template grammar:
    template     := (text | placeholder | plural)*
    placeholder  := "{" NAME "}"
    plural       := "{" NAME "," "plural" "," option+ "}"
    option       := SELECTOR "{" clause-text "}"
    SELECTOR     := "=" DIGITS | "zero" | "one" | "other"

Inside clause text, ``#`` stands for the count and placeholders are
substituted. Clause text may contain balanced braces (nested placeholders).

Rendering helpers in this module never raise; parse_template() with
strict=True raises TemplateError for the audit.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from localeengine.diagnostics import Diagnostic, DiagnosticCode, TemplateError

__all__ = [
    "ParsedTemplate",
    "PluralClause",
    "parse_template",
    "substitute",
    "template_placeholders",
]

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
_PLURAL_HEAD_RE = re.compile(r"\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*,\s*plural\s*,")
_SELECTOR_RE = re.compile(r"=\d+|[a-z]+")


@dataclass(frozen=True, slots=True)
class PluralClause:
    """One ``{var, plural, ...}`` block in a template.

    Attributes:
        variable: Name of the counted variable
        options: Selector -> clause text, in template order
        start: Offset of the opening brace
        end: Offset just past the closing brace
    """

    variable: str
    options: Mapping[str, str]
    start: int
    end: int

    def select(self, count: int | float | None, category: str) -> str | None:
        """Pick the clause text for a count.

        An exact ``=N`` selector matching the count wins, then the category
        keyword, then ``other``.

        Args:
            count: Counted value (None skips exact matching)
            category: Plural category of the count

        Returns:
            Clause text, or None if neither the category nor other exists
        """
        if count is not None and float(count).is_integer():
            exact = self.options.get(f"={int(count)}")
            if exact is not None:
                return exact
        chosen = self.options.get(category)
        if chosen is not None:
            return chosen
        return self.options.get("other")


@dataclass(frozen=True, slots=True)
class ParsedTemplate:
    """Plural blocks found in a template.

    Attributes:
        clauses: Well-formed plural blocks in template order
        malformed: True if scanning stopped at a malformed plural block
    """

    clauses: tuple[PluralClause, ...]
    malformed: bool = False

    @property
    def has_plural(self) -> bool:
        """Check if the template contains any plural block."""
        return bool(self.clauses) or self.malformed


def _read_braced(template: str, pos: int) -> int:
    """Return the offset just past the brace closing the one at pos, or -1."""
    depth = 0
    for index in range(pos, len(template)):
        char = template[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return -1


def _parse_clause(template: str, match: re.Match[str]) -> PluralClause | None:
    pos = match.end()
    options: dict[str, str] = {}
    length = len(template)
    while True:
        while pos < length and template[pos].isspace():
            pos += 1
        if pos >= length:
            return None
        if template[pos] == "}":
            break
        selector = _SELECTOR_RE.match(template, pos)
        if selector is None:
            return None
        pos = selector.end()
        while pos < length and template[pos].isspace():
            pos += 1
        if pos >= length or template[pos] != "{":
            return None
        end = _read_braced(template, pos)
        if end < 0:
            return None
        options[selector.group()] = template[pos + 1 : end - 1]
        pos = end
    if not options:
        return None
    return PluralClause(
        variable=match.group(1),
        options=MappingProxyType(options),
        start=match.start(),
        end=pos + 1,
    )


def parse_template(template: str, *, strict: bool = False) -> ParsedTemplate:
    """Find every plural block in a template.

    Args:
        template: Template text
        strict: Raise TemplateError on a malformed block instead of
            flagging the result as malformed

    Returns:
        ParsedTemplate with the plural blocks in template order

    Raises:
        TemplateError: If strict and a plural block is malformed

    Example:
        >>> parsed = parse_template("{count, plural, =0{none} other{# items}}")
        >>> clause, = parsed.clauses
        >>> dict(clause.options)
        {'=0': 'none', 'other': '# items'}
    """
    clauses: list[PluralClause] = []
    pos = 0
    while (match := _PLURAL_HEAD_RE.search(template, pos)) is not None:
        clause = _parse_clause(template, match)
        if clause is None:
            if strict:
                diagnostic = Diagnostic(
                    code=DiagnosticCode.TEMPLATE_MALFORMED,
                    message=f"Malformed plural block at offset {match.start()}",
                )
                raise TemplateError(diagnostic)
            return ParsedTemplate(tuple(clauses), malformed=True)
        clauses.append(clause)
        pos = clause.end
    return ParsedTemplate(tuple(clauses))


def substitute(
    text: str,
    values: Mapping[str, object],
    formatter: Callable[[object], str] = str,
) -> str:
    """Replace ``{name}`` placeholders with values.

    Unknown placeholders are left verbatim.

    Args:
        text: Text containing placeholders
        values: Placeholder values
        formatter: Converts a value to display text (default: str)

    Returns:
        Substituted text

    Example:
        >>> substitute("Hi {name}, {unknown}", {"name": "Ana"})
        'Hi Ana, {unknown}'
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in values:
            return formatter(values[name])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(replace, text)


def template_placeholders(template: str) -> frozenset[str]:
    """Get every placeholder and plural variable name a template uses.

    Example:
        >>> sorted(template_placeholders("{name}: {count, plural, other{# of {total}}}"))
        ['count', 'name', 'total']
    """
    names = set(_PLACEHOLDER_RE.findall(template))
    names.update(match.group(1) for match in _PLURAL_HEAD_RE.finditer(template))
    return frozenset(names)
