"""Translation-completeness audit.

Compares each catalog locale's own bundle with a reference bundle, off the
hot formatting path. Rendering degrades silently; this is where the
degradation becomes visible.

Checks per locale:
- Keys missing from the locale (would fall back or echo the key)
- Keys the reference does not have (likely stale)
- Placeholder sets differing from the reference template
- Malformed plural blocks
- Plural blocks without an "other" clause (rendering returns the raw template)
- Plural blocks without a "one" clause in languages that distinguish it

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from localeengine.catalog import LocaleCatalog
from localeengine.constants import DEFAULT_LOCALE_TAG, NO_PLURAL_LANGUAGES
from localeengine.core.locale_id import LocaleId
from localeengine.diagnostics import (
    BundleLoadError,
    BundleNotFoundError,
    Diagnostic,
    DiagnosticCode,
    Severity,
    TemplateError,
)
from localeengine.localization.loading import ResourceProvider
from localeengine.runtime.bundle import ResourceBundle
from localeengine.runtime.templates import parse_template, template_placeholders

__all__ = ["AuditReport", "LocaleAudit", "audit_bundles"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocaleAudit:
    """Audit findings for one locale.

    Attributes:
        locale_id: Audited locale
        missing_keys: Reference keys absent from the locale, sorted
        extra_keys: Locale keys absent from the reference, sorted
        diagnostics: Every finding, including load failures
    """

    locale_id: LocaleId
    missing_keys: tuple[str, ...] = ()
    extra_keys: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def is_complete(self) -> bool:
        """Check if the locale has no findings."""
        return not self.diagnostics and not self.extra_keys

    def codes(self) -> frozenset[DiagnosticCode]:
        """Get the distinct diagnostic codes reported for this locale."""
        return frozenset(d.code for d in self.diagnostics)


@dataclass(frozen=True, slots=True)
class AuditReport:
    """Immutable audit result across locales.

    Attributes:
        reference: Locale whose bundle defines the expected keys
        locales: Per-locale findings in catalog order
    """

    reference: LocaleId
    locales: tuple[LocaleAudit, ...]

    @property
    def is_complete(self) -> bool:
        """Check if every audited locale is complete."""
        return all(audit.is_complete for audit in self.locales)

    def get(self, locale_id: LocaleId) -> LocaleAudit | None:
        """Get the findings for one locale."""
        for audit in self.locales:
            if audit.locale_id == locale_id:
                return audit
        return None

    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Get every finding across locales."""
        return tuple(d for audit in self.locales for d in audit.diagnostics)


def _load(
    provider: ResourceProvider, locale_id: LocaleId
) -> tuple[ResourceBundle | None, Diagnostic | None]:
    try:
        return ResourceBundle.from_mapping(locale_id, provider.load_bundle(locale_id)), None
    except (BundleNotFoundError, FileNotFoundError) as e:
        code, error = DiagnosticCode.BUNDLE_NOT_FOUND, e
    except BundleLoadError as e:
        code = e.diagnostic.code if e.diagnostic is not None else DiagnosticCode.BUNDLE_LOAD_FAILED
        error = e
    except Exception as e:  # noqa: BLE001 - provider is external code; failure becomes a finding
        code, error = DiagnosticCode.BUNDLE_LOAD_FAILED, e
    diagnostic = Diagnostic(
        code=code,
        message=str(error),
        locale_code=str(locale_id),
        severity=Severity.ERROR,
    )
    return None, diagnostic


def _check_template(
    locale_id: LocaleId,
    key: str,
    template: str,
    no_plural_languages: frozenset[str],
) -> list[Diagnostic]:
    found: list[Diagnostic] = []
    try:
        parsed = parse_template(template, strict=True)
    except TemplateError as e:
        message = e.diagnostic.message if e.diagnostic is not None else str(e)
        return [Diagnostic(DiagnosticCode.TEMPLATE_MALFORMED, message, str(locale_id), key)]

    for clause in parsed.clauses:
        if "other" not in clause.options:
            found.append(
                Diagnostic(
                    DiagnosticCode.PLURAL_OTHER_MISSING,
                    f"Plural block for '{clause.variable}' has no 'other' clause",
                    str(locale_id),
                    key,
                )
            )
        if (
            locale_id.language not in no_plural_languages
            and "one" not in clause.options
            and "=1" not in clause.options
        ):
            found.append(
                Diagnostic(
                    DiagnosticCode.PLURAL_CLAUSE_MISSING,
                    f"Plural block for '{clause.variable}' has no 'one' clause",
                    str(locale_id),
                    key,
                )
            )
    return found


def _audit_locale(
    locale_id: LocaleId,
    bundle: ResourceBundle,
    reference: ResourceBundle,
    no_plural_languages: frozenset[str],
) -> LocaleAudit:
    diagnostics: list[Diagnostic] = []
    missing = tuple(sorted(set(reference) - set(bundle)))
    extra = tuple(sorted(set(bundle) - set(reference)))

    diagnostics.extend(
        Diagnostic(
            DiagnosticCode.KEY_MISSING,
            "Key present in the reference bundle is missing",
            str(locale_id),
            key,
        )
        for key in missing
    )

    for key, template in bundle.items():
        diagnostics.extend(_check_template(locale_id, key, template, no_plural_languages))
        expected = reference.get(key)
        if expected is None:
            continue
        ours, theirs = template_placeholders(template), template_placeholders(expected)
        if ours != theirs:
            diagnostics.append(
                Diagnostic(
                    DiagnosticCode.PLACEHOLDER_MISMATCH,
                    f"Placeholders {sorted(ours)} differ from reference {sorted(theirs)}",
                    str(locale_id),
                    key,
                )
            )

    return LocaleAudit(locale_id, missing, extra, tuple(diagnostics))


def audit_bundles(
    catalog: LocaleCatalog | Iterable[LocaleId],
    provider: ResourceProvider,
    *,
    reference: LocaleId | None = None,
    no_plural_languages: frozenset[str] = NO_PLURAL_LANGUAGES,
) -> AuditReport:
    """Audit every locale's bundle against a reference bundle.

    Each locale is checked against its own bundle only; fallback links do
    not count as coverage.

    Args:
        catalog: Locales to audit (a LocaleCatalog or LocaleIds)
        provider: Resource provider to read bundles from
        reference: Locale defining the expected keys (default: zh_CN)
        no_plural_languages: Languages exempt from the "one" clause check

    Returns:
        AuditReport in catalog order

    Example:
        >>> from localeengine.localization.loading import DictResourceProvider
        >>> provider = DictResourceProvider({
        ...     "zh_CN": {"greeting": "你好，{name}"},
        ...     "en_US": {"greeting": "Hello"},
        ... })
        >>> report = audit_bundles([LocaleId("en", "US")], provider)
        >>> [d.code.name for d in report.diagnostics()]
        ['PLACEHOLDER_MISMATCH']
    """
    reference_id = reference if reference is not None else LocaleId.parse(DEFAULT_LOCALE_TAG)
    locale_ids = catalog.identifiers() if isinstance(catalog, LocaleCatalog) else tuple(catalog)

    reference_bundle, failure = _load(provider, reference_id)
    if reference_bundle is None:
        # Without a reference only load and template checks are possible
        logger.warning("Audit reference bundle %s unavailable: %s", reference_id, failure)
        reference_bundle = ResourceBundle.empty()

    audits: list[LocaleAudit] = []
    for locale_id in locale_ids:
        bundle, failure = _load(provider, locale_id)
        if bundle is None:
            audits.append(LocaleAudit(locale_id, diagnostics=(failure,) if failure else ()))
            continue
        audit = _audit_locale(locale_id, bundle, reference_bundle, no_plural_languages)
        if reference_bundle.is_empty:
            audit = LocaleAudit(locale_id, diagnostics=audit.diagnostics)
        audits.append(audit)

    for audit in audits:
        for diagnostic in audit.diagnostics:
            logger.debug("%s", diagnostic.format_error())

    return AuditReport(reference=reference_id, locales=tuple(audits))
