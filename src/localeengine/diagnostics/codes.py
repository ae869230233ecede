"""Diagnostic codes and data structures.

Defines error codes and structured diagnostic records used in log messages,
exception payloads and the translation-completeness audit.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
]


class Severity(StrEnum):
    """Severity of a diagnostic.

    Inherits from ``StrEnum`` so that log aggregation receives plain strings
    (``"warning"``, ``"error"``) rather than the ``"Severity.X"`` repr.
    """

    WARNING = "warning"
    ERROR = "error"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Lookup problems (missing keys)
        2000-2999: Template problems (plural clauses, placeholders)
        3000-3999: Resource loading problems (providers, bundles)
        4000-4999: Persistence problems (preference store)
    """

    # Lookup (1000-1999)
    KEY_MISSING = 1001

    # Templates (2000-2999)
    PLURAL_CLAUSE_MISSING = 2001
    PLURAL_OTHER_MISSING = 2002
    PLACEHOLDER_MISMATCH = 2003
    TEMPLATE_MALFORMED = 2004

    # Loading (3000-3999)
    BUNDLE_NOT_FOUND = 3001
    BUNDLE_LOAD_FAILED = 3002
    BUNDLE_INVALID = 3003

    # Persistence (4000-4999)
    PREFERENCE_READ_FAILED = 4001


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic record.

    Attributes:
        code: Unique diagnostic code
        message: Human-readable description
        locale_code: Locale the problem was observed in (empty if not applicable)
        key: Translation key or resource involved (empty if not applicable)
        severity: Warning for degraded output, error for failed operations
    """

    code: DiagnosticCode
    message: str
    locale_code: str = ""
    key: str = ""
    severity: Severity = Severity.WARNING

    def format_error(self) -> str:
        """Format diagnostic as a single log-friendly line.

        Returns:
            Line like ``warning[PLURAL_OTHER_MISSING]: ... (locale=en_US, key=items)``

        Example:
            >>> Diagnostic(DiagnosticCode.KEY_MISSING, "no template").format_error()
            'warning[KEY_MISSING]: no template'
        """
        parts = [f"{self.severity}[{self.code.name}]: {self.message}"]
        details = []
        if self.locale_code:
            details.append(f"locale={self.locale_code}")
        if self.key:
            details.append(f"key={self.key}")
        if details:
            parts.append(f"({', '.join(details)})")
        return " ".join(parts)
