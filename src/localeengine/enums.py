"""Enumerations for localeengine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Closed enumerations replace string-keyed dispatch: each error kind and
transaction kind maps to exactly one translation key through a single
table (ERROR_KIND_KEYS, TRANSACTION_KIND_KEYS).

Python 3.13+.
"""

from enum import StrEnum
from types import MappingProxyType

__all__ = [
    "ERROR_KIND_KEYS",
    "TRANSACTION_KIND_KEYS",
    "ErrorKind",
    "LoadStatus",
    "PluralCategory",
    "TransactionKind",
]


class PluralCategory(StrEnum):
    """Plural category used to choose a template clause.

    StrEnum provides automatic string conversion: str(PluralCategory.ONE) == "one"
    """

    ZERO = "zero"
    """Count is exactly zero (languages with plural distinction only)."""

    ONE = "one"
    """Count is exactly one (languages with plural distinction only)."""

    OTHER = "other"
    """Every remaining count, and every count in no-plural languages."""


class TransactionKind(StrEnum):
    """Kind of ledger transaction, drives the sign of formatted amounts."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class ErrorKind(StrEnum):
    """User-facing error categories with translated descriptions."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    STORAGE = "storage"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class LoadStatus(StrEnum):
    """Outcome of a single resource bundle load attempt."""

    SUCCESS = "success"
    """Provider returned a bundle."""

    NOT_FOUND = "not_found"
    """Provider has no bundle for the locale (expected for chain links)."""

    ERROR = "error"
    """Provider raised an unexpected error (I/O, decoding, bad data)."""

    TIMEOUT = "timeout"
    """Caller stopped waiting before the provider finished."""


ERROR_KIND_KEYS: MappingProxyType[ErrorKind, str] = MappingProxyType({
    ErrorKind.NETWORK: "error.network",
    ErrorKind.TIMEOUT: "error.timeout",
    ErrorKind.STORAGE: "error.storage",
    ErrorKind.VALIDATION: "error.validation",
    ErrorKind.NOT_FOUND: "error.not_found",
    ErrorKind.UNKNOWN: "error.unknown",
})

TRANSACTION_KIND_KEYS: MappingProxyType[TransactionKind, str] = MappingProxyType({
    TransactionKind.INCOME: "transaction.income",
    TransactionKind.EXPENSE: "transaction.expense",
    TransactionKind.TRANSFER: "transaction.transfer",
})
