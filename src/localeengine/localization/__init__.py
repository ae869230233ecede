"""Locale resolution, persistence, resource loading and the session.

Submodules:
    loading     - ResourceProvider protocol, Path/Package/Dict providers,
                  FallbackInfo, ResourceLoadResult, LoadSummary
    resolver    - resolve_locale (preference -> device -> language -> default)
    preferences - PreferenceStore protocol, stores, PreferenceGateway
    session     - LocaleSession (atomic locale switching)
    audit       - audit_bundles (translation completeness)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from localeengine.enums import LoadStatus
from localeengine.localization.loading import (
    DictResourceProvider,
    FallbackInfo,
    LoadSummary,
    PackageResourceProvider,
    PathResourceProvider,
    ResourceLoadResult,
    ResourceProvider,
)
from localeengine.localization.preferences import (
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferenceGateway,
    PreferenceStore,
)
from localeengine.localization.resolver import resolve_locale
from localeengine.localization.session import LocaleChange, LocaleSession, LocaleState
from localeengine.localization.audit import AuditReport, LocaleAudit, audit_bundles

__all__ = [
    # Session
    "LocaleSession",
    "LocaleState",
    "LocaleChange",
    # Resolution
    "resolve_locale",
    # Preferences
    "PreferenceStore",
    "PreferenceGateway",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    # Provider protocol and implementations
    "ResourceProvider",
    "PathResourceProvider",
    "PackageResourceProvider",
    "DictResourceProvider",
    # Load tracking
    "LoadStatus",
    "LoadSummary",
    "ResourceLoadResult",
    # Fallback observability
    "FallbackInfo",
    # Audit
    "audit_bundles",
    "AuditReport",
    "LocaleAudit",
]
