"""localeengine - locale resolution and localized formatting.

Resolves the active locale from a saved preference, the device locale and a
catalog of supported locales; loads per-locale resource bundles through a
fallback chain; formats numbers, currency, dates and relative time; renders
plural templates.

Public API:
    LocaleSession - Active locale with atomic switching
    LocaleId - (language, region) identifier
    LocaleCatalog, LocaleEntry - Supported locales
    resolve_locale - Preference -> device -> language -> default resolution
    FormatEngine - Locale-bound formatting and currency parsing
    PluralSelector - Plural category selection and template rendering
    EngineConfig - Tunable defaults

Exceptions:
    LocaleEngineError - Base exception class
    PersistenceError - Preference store failures
    BundleLoadError, BundleNotFoundError - Resource provider failures
    TemplateError - Malformed templates (audit only)

Submodules:
    localeengine.localization - Providers, preferences, session, audit
    localeengine.runtime - Bundles, format rules, formatting, plurals
    localeengine.parsing - Currency string parsing
    localeengine.diagnostics - Diagnostic codes and exceptions
"""

# localization must be imported before runtime (bundle cache depends on loading)
from .catalog import DEFAULT_CATALOG, LocaleCatalog, LocaleEntry
from .config import DEFAULT_CONFIG, EngineConfig
from .core import LocaleId, detect_device_locale, fallback_chain
from .diagnostics import (
    BundleLoadError,
    BundleNotFoundError,
    LocaleEngineError,
    PersistenceError,
    TemplateError,
)
from .enums import ErrorKind, PluralCategory, TransactionKind
from .localization import LocaleSession, audit_bundles, resolve_locale
from .runtime import FormatEngine, PluralSelector

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("localeengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_CONFIG",
    "BundleLoadError",
    "BundleNotFoundError",
    "EngineConfig",
    "ErrorKind",
    "FormatEngine",
    "LocaleCatalog",
    "LocaleEngineError",
    "LocaleEntry",
    "LocaleId",
    "LocaleSession",
    "PersistenceError",
    "PluralCategory",
    "PluralSelector",
    "TemplateError",
    "TransactionKind",
    "__version__",
    "audit_bundles",
    "detect_device_locale",
    "fallback_chain",
    "resolve_locale",
]
