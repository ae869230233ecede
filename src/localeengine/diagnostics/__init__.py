"""Diagnostic system for localeengine errors.

Provides structured diagnostics with codes and locale/key context, plus the
exception hierarchy raised at collaborator boundaries.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, Severity
from .errors import (
    BundleLoadError,
    BundleNotFoundError,
    LocaleEngineError,
    PersistenceError,
    TemplateError,
)

__all__ = [
    "BundleLoadError",
    "BundleNotFoundError",
    "Diagnostic",
    "DiagnosticCode",
    "LocaleEngineError",
    "PersistenceError",
    "Severity",
    "TemplateError",
]
