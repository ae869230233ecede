"""Resource bundle loading infrastructure.

Provides the protocol for resource providers, filesystem, package-data and
in-memory implementations, and result/summary data structures for tracking
load attempts.

Components:
    ResourceProvider - Protocol for loading key -> template bundles (structural typing)
    PathResourceProvider - JSON-file-per-locale loader with path-traversal prevention
    PackageResourceProvider - Bundles shipped inside localeengine/data/locales
    DictResourceProvider - In-memory bundles
    FallbackInfo - Immutable record of a bundle fallback event
    ResourceLoadResult - Immutable result of a single load attempt
    LoadSummary - Immutable aggregate of load results

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Protocol

from localeengine.core.locale_id import LocaleId
from localeengine.diagnostics import BundleLoadError, BundleNotFoundError
from localeengine.enums import LoadStatus

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ResourceProvider",
    # Concrete providers
    "PathResourceProvider",
    "PackageResourceProvider",
    "DictResourceProvider",
    # Fallback observability
    "FallbackInfo",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
]


class ResourceProvider(Protocol):
    """Protocol for loading the resource bundle of one locale.

    This is a Protocol (structural typing) rather than ABC to allow
    maximum flexibility for users implementing custom providers.

    Example:
        >>> class RemoteProvider:
        ...     def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
        ...         return fetch_translations(str(locale_id))
        ...     def describe(self, locale_id: LocaleId) -> str:
        ...         return f"remote:{locale_id}"
    """

    def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
        """Load the key -> template mapping for a locale.

        Args:
            locale_id: Locale to load (may be language-only)

        Returns:
            Flat mapping of translation key to template string

        Raises:
            BundleNotFoundError: If no bundle exists for this locale
            FileNotFoundError: Treated the same as BundleNotFoundError
            BundleLoadError: If the bundle exists but cannot be used
            OSError: If the backing medium fails
        """

    def describe(self, locale_id: LocaleId) -> str:
        """Return human-readable source description for diagnostics.

        Args:
            locale_id: Locale being loaded

        Returns:
            Description used in load results and log messages
        """
        return str(locale_id)


def _decode_json_bundle(raw: str, source: str) -> Mapping[str, str]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        msg = f"Bundle {source} is not valid JSON: {e}"
        raise BundleLoadError(msg) from e
    if not isinstance(data, dict):
        msg = f"Bundle {source} must contain a JSON object"
        raise BundleLoadError(msg)
    return data


@dataclass(frozen=True, slots=True)
class PathResourceProvider:
    """File system provider using a path template.

    Implements ResourceProvider for one JSON object per locale.
    Uses {locale} placeholder in the template for locale substitution
    (POSIX form, e.g. "zh_CN", or "en" for a language-only link).

    Security:
        Resolved paths are validated against a fixed root directory.

    Example:
        >>> provider = PathResourceProvider("locales/{locale}.json")
        >>> bundle = provider.load_bundle(LocaleId("en", "US"))
        # Loads from: locales/en_US.json

    Attributes:
        path_template: Path template with {locale} placeholder
        root_dir: Fixed root directory for path traversal validation.
                  Defaults to the static prefix of path_template.
    """

    path_template: str
    root_dir: str | None = None
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache resolved root directory and validate template at initialization.

        Raises:
            ValueError: If path_template does not contain {locale} placeholder
        """
        # Without this placeholder, all locales would load from the same path.
        if "{locale}" not in self.path_template:
            msg = (
                f"path_template must contain '{{locale}}' placeholder for locale substitution, "
                f"got: '{self.path_template}'"
            )
            raise ValueError(msg)

        if self.root_dir is not None:
            resolved = Path(self.root_dir).resolve()
        else:
            # e.g., "locales/{locale}.json" -> "locales", "i18n/app_{locale}.json" -> "i18n"
            static_prefix = self.path_template.split("{locale}")[0]
            if static_prefix.endswith(("/", "\\")):
                resolved = Path(static_prefix).resolve()
            elif static_prefix:
                resolved = Path(static_prefix).parent.resolve()
            else:
                resolved = Path.cwd().resolve()
        object.__setattr__(self, "_resolved_root", resolved)

    @staticmethod
    def _is_safe_path(base_dir: Path, full_path: Path) -> bool:
        """Check if full_path is safely within base_dir."""
        try:
            full_path.resolve().relative_to(base_dir.resolve())
        except ValueError:
            return False
        return True

    def describe(self, locale_id: LocaleId) -> str:
        """Return the locale-substituted file path."""
        # replace() instead of format(): other braces in the template stay literal
        return self.path_template.replace("{locale}", str(locale_id))

    def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
        """Load a JSON bundle from disk.

        Raises:
            BundleNotFoundError: If the file does not exist
            BundleLoadError: If the path escapes the root or the JSON is invalid
            OSError: If the file cannot be read
        """
        full_path = Path(self.describe(locale_id)).resolve()
        if not self._is_safe_path(self._resolved_root, full_path):
            msg = f"Path traversal detected: resolved path escapes root directory for '{locale_id}'"
            raise BundleLoadError(msg)

        try:
            raw = full_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            msg = f"No bundle at {full_path}"
            raise BundleNotFoundError(msg) from e
        return _decode_json_bundle(raw, str(full_path))


@dataclass(frozen=True, slots=True)
class PackageResourceProvider:
    """Provider for bundles shipped with the package.

    Reads ``{locale}.json`` from the ``localeengine.data`` package's
    ``locales`` directory (or another package/directory pair).

    Attributes:
        package: Importable package holding the data
        directory: Subdirectory containing the JSON files
    """

    package: str = "localeengine.data"
    directory: str = "locales"

    def describe(self, locale_id: LocaleId) -> str:
        return f"{self.package}:{self.directory}/{locale_id}.json"

    def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
        resource = resources.files(self.package).joinpath(self.directory, f"{locale_id}.json")
        if not resource.is_file():
            msg = f"No packaged bundle for '{locale_id}'"
            raise BundleNotFoundError(msg)
        return _decode_json_bundle(resource.read_text(encoding="utf-8"), self.describe(locale_id))


class DictResourceProvider:
    """In-memory provider.

    Keys may be LocaleIds or locale strings ("en_US", "en-US", "en").

    Example:
        >>> provider = DictResourceProvider({"en": {"hello": "Hello"}})
        >>> provider.load_bundle(LocaleId("en"))
        {'hello': 'Hello'}
    """

    __slots__ = ("_bundles",)

    def __init__(self, bundles: Mapping[LocaleId | str, Mapping[str, str]]) -> None:
        self._bundles: dict[LocaleId, Mapping[str, str]] = {
            key if isinstance(key, LocaleId) else LocaleId.parse(key): value
            for key, value in bundles.items()
        }

    def describe(self, locale_id: LocaleId) -> str:
        return f"memory:{locale_id}"

    def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
        try:
            return self._bundles[locale_id]
        except KeyError:
            msg = f"No in-memory bundle for '{locale_id}'"
            raise BundleNotFoundError(msg) from None


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a bundle fallback event.

    Provided to the on_fallback callback when BundleCache serves a bundle
    from a later chain link than the one requested.

    Attributes:
        requested_locale: The locale the caller asked for
        resolved_locale: The locale whose bundle was served (None for the empty bundle)

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"Bundle for {info.requested_locale} served from {info.resolved_locale}")
    """

    requested_locale: LocaleId
    resolved_locale: LocaleId | None


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of one provider load attempt.

    Attributes:
        locale_id: Locale that was loaded
        status: Load status (success, not_found, error, timeout)
        error: Exception if status is ERROR, None otherwise
        source: Human-readable source description
        duration: Seconds spent in the provider (or waiting, for timeouts)
        entry_count: Number of templates loaded (0 unless successful)
    """

    locale_id: LocaleId
    status: LoadStatus
    error: Exception | None = None
    source: str = ""
    duration: float = 0.0
    entry_count: int = 0

    @property
    def is_success(self) -> bool:
        """Check if bundle loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if bundle was not found (expected for chain links)."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if bundle load failed with an error."""
        return self.status == LoadStatus.ERROR

    @property
    def is_timeout(self) -> bool:
        """Check if the caller gave up waiting."""
        return self.status == LoadStatus.TIMEOUT


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of bundle load results.

    Attributes:
        results: All individual load results (immutable tuple)

    Example:
        >>> summary = cache.get_load_summary()
        >>> for result in summary.get_errors():
        ...     print(f"Failed: {result.locale_id} from {result.source}: {result.error}")
    """

    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors}, "
            f"timeouts={self.timeouts})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful loads."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of bundles not found."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of load errors."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def timeouts(self) -> int:
        """Number of loads abandoned after the timeout."""
        return sum(1 for r in self.results if r.is_timeout)

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results where the bundle was not found."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_by_locale(self, locale_id: LocaleId) -> tuple[ResourceLoadResult, ...]:
        """Get all results for a specific locale."""
        return tuple(r for r in self.results if r.locale_id == locale_id)

    @property
    def has_errors(self) -> bool:
        """Check if any bundle failed to load with errors or timeouts."""
        return self.errors > 0 or self.timeouts > 0
