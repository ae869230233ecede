"""localeengine exception hierarchy with structured diagnostics.

Exceptions are raised only at collaborator boundaries (preference stores,
resource providers) and for programmer errors. Formatting and lookup entry
points catch them and degrade to best-effort output.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class LocaleEngineError(Exception):
    """Base exception for all localeengine errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LocaleEngineError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class PersistenceError(LocaleEngineError):
    """Preference store could not read or write a value.

    Stores raise this (or OSError) from get/set. PreferenceGateway converts
    it into a None/False result; it never reaches formatting callers.
    """


class BundleLoadError(LocaleEngineError):
    """Resource provider failed for a reason other than a missing bundle.

    Examples:
    - Unreadable file
    - Invalid JSON
    - Bundle values that are not strings
    """


class BundleNotFoundError(BundleLoadError, LookupError):
    """Resource provider has no bundle for the requested locale.

    Expected for language-only chain links; logged at debug level.
    """


class TemplateError(LocaleEngineError):
    """Template text is malformed.

    Raised by strict template inspection used by the audit. Rendering
    never raises it; it falls back to the raw template instead.
    """
