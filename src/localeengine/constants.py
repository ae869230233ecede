"""Shared constants for localeengine.

This module provides centralized configuration constants used across
the catalog, localization and runtime packages. Placing constants here
avoids circular imports and provides a single source of truth.

Constants are grouped by domain:
- Locale defaults: Default locale and preference storage key
- Plural rules: Languages without a singular/plural distinction
- Loading limits: Bounds on bundle loading latency and concurrency
- Cache limits: Memory bounds for caching subsystems
- Formatting: Digit counts and relative-time thresholds

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Locale defaults
    "DEFAULT_LOCALE_TAG",
    "PREFERENCE_KEY",
    # Plural rules
    "NO_PLURAL_LANGUAGES",
    # Loading limits
    "DEFAULT_LOAD_TIMEOUT",
    "DEFAULT_LOADER_WORKERS",
    # Cache limits
    "MAX_ENGINE_CACHE_SIZE",
    "MAX_LOAD_RESULTS",
    # Formatting
    "MAX_FRACTION_DIGITS",
    "RELATIVE_DAYS_CUTOFF",
]

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

# Locale returned by resolution when neither the saved preference nor the
# device locale matches the catalog. Also the last link of every bundle chain.
DEFAULT_LOCALE_TAG: str = "zh_CN"

# Preference store key holding the user's explicit locale choice.
# Value format: "{language}_{region}".
PREFERENCE_KEY: str = "selected_locale"

# ============================================================================
# PLURAL RULES
# ============================================================================

# Languages whose CLDR plural rules only define the "other" category.
# Counts in these languages never select "zero" or "one" clauses.
NO_PLURAL_LANGUAGES: frozenset[str] = frozenset({
    "zh", "ja", "ko", "vi", "th", "id", "ms", "lo", "my", "km",
})

# ============================================================================
# LOADING LIMITS
# ============================================================================

# Seconds a caller waits for one bundle load before treating it as failed.
# The provider call keeps running in the loader pool; a later request may
# still pick up its result.
DEFAULT_LOAD_TIMEOUT: float = 5.0

# Worker threads used for provider calls.
# Bundle count is bounded by catalog size, so a small pool suffices.
DEFAULT_LOADER_WORKERS: int = 4

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached FormatEngine instances.
# 64 covers the shipped catalog plus ad-hoc locales used by tests or audits.
MAX_ENGINE_CACHE_SIZE: int = 64

# Load results kept for LoadSummary, oldest dropped first.
# Failed loads are retried on every request, so the log must be bounded.
MAX_LOAD_RESULTS: int = 256

# ============================================================================
# FORMATTING
# ============================================================================

# Plain numbers show at most this many fractional digits (trailing zeros trimmed).
MAX_FRACTION_DIGITS: int = 2

# Relative time switches to an absolute date at this many days.
RELATIVE_DAYS_CUTOFF: int = 30
