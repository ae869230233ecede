"""Persisted locale preference.

Components:
    PreferenceStore - Protocol for the external key-value store (structural typing)
    InMemoryPreferenceStore - Dict-backed store for tests and embedding
    JsonFilePreferenceStore - Single JSON document on disk, atomic writes
    PreferenceGateway - Serializes a LocaleId to/from the store, failing soft

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

from localeengine.constants import PREFERENCE_KEY
from localeengine.core.locale_id import LocaleId
from localeengine.diagnostics import Diagnostic, DiagnosticCode, PersistenceError, Severity

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "PreferenceStore",
    # Concrete stores
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    # Gateway
    "PreferenceGateway",
]

logger = logging.getLogger(__name__)


class PreferenceStore(Protocol):
    """Protocol for an opaque string key-value store.

    Implementations signal failures by raising PersistenceError or OSError.
    A missing key is not a failure: get() returns None.

    Example:
        >>> class SettingsStore:
        ...     def __init__(self) -> None:
        ...         self.values: dict[str, str] = {}
        ...     def get(self, key: str) -> str | None:
        ...         return self.values.get(key)
        ...     def set(self, key: str, value: str) -> None:
        ...         self.values[key] = value
        ...
        >>> gateway = PreferenceGateway(SettingsStore())
    """

    def get(self, key: str) -> str | None:
        """Read a value.

        Args:
            key: Store key

        Returns:
            Stored string, or None if the key is absent

        Raises:
            PersistenceError: If the store cannot be read
            OSError: If the backing medium fails
        """

    def set(self, key: str, value: str) -> None:
        """Write a value.

        Args:
            key: Store key
            value: String to store

        Raises:
            PersistenceError: If the store cannot be written
            OSError: If the backing medium fails
        """


class InMemoryPreferenceStore:
    """Dict-backed PreferenceStore.

    Thread-safe via an internal lock.
    """

    __slots__ = ("_lock", "_values")

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def snapshot(self) -> dict[str, str]:
        """Get a copy of all stored values."""
        with self._lock:
            return dict(self._values)


class JsonFilePreferenceStore:
    """PreferenceStore persisted as one JSON object on disk.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace(), so readers never observe a half-written file.
    A missing file reads as an empty store.

    Example:
        >>> store = JsonFilePreferenceStore("~/.config/ledger/preferences.json")
        >>> store.set("selected_locale", "ja_JP")
        >>> store.get("selected_locale")
        'ja_JP'

    Attributes:
        path: Location of the JSON document
    """

    __slots__ = ("_lock", "path")

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            diagnostic = Diagnostic(
                code=DiagnosticCode.PREFERENCE_READ_FAILED,
                message=f"Preference file is not valid JSON: {e}",
                key=str(self.path),
                severity=Severity.ERROR,
            )
            raise PersistenceError(diagnostic) from e
        if not isinstance(data, dict):
            diagnostic = Diagnostic(
                code=DiagnosticCode.PREFERENCE_READ_FAILED,
                message="Preference file must contain a JSON object",
                key=str(self.path),
                severity=Severity.ERROR,
            )
            raise PersistenceError(diagnostic)
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    json.dump(data, tmp, ensure_ascii=False, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise


class PreferenceGateway:
    """Reads and writes the saved locale through a PreferenceStore.

    Value format is ``"{language}_{region}"``. Both operations fail soft:
    load() returns None and save() returns False, with the cause logged.

    Example:
        >>> gateway = PreferenceGateway(InMemoryPreferenceStore())
        >>> gateway.save(LocaleId("ja", "JP"))
        True
        >>> gateway.load()
        LocaleId(language='ja', region='JP')
    """

    __slots__ = ("_key", "_store")

    def __init__(self, store: PreferenceStore, *, key: str = PREFERENCE_KEY) -> None:
        """Initialize gateway.

        Args:
            store: External preference store
            key: Store key for the locale preference (default: "selected_locale")
        """
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        """Store key used for the locale preference."""
        return self._key

    @staticmethod
    def deserialize(value: object) -> LocaleId | None:
        """Parse a stored preference value.

        Accepts exactly two non-empty ``_``-separated subtags.

        Args:
            value: Raw stored value

        Returns:
            LocaleId, or None if the value is malformed

        Example:
            >>> PreferenceGateway.deserialize("zh_TW")
            LocaleId(language='zh', region='TW')
            >>> PreferenceGateway.deserialize("zh") is None
            True
        """
        if not isinstance(value, str):
            return None
        parts = value.split("_")
        if len(parts) != 2 or not all(parts):
            return None
        try:
            return LocaleId(parts[0], parts[1])
        except ValueError:
            return None

    @staticmethod
    def serialize(locale_id: LocaleId) -> str:
        """Serialize a LocaleId for storage (region omitted only if absent)."""
        return str(locale_id)

    def load(self) -> LocaleId | None:
        """Load the saved locale.

        Returns:
            Saved LocaleId, or None if absent, malformed or unreadable
        """
        try:
            value = self._store.get(self._key)
        except (PersistenceError, OSError) as e:
            logger.warning("Could not read locale preference '%s': %s", self._key, e)
            return None

        if value is None:
            logger.debug("No saved locale preference under '%s'", self._key)
            return None

        locale_id = self.deserialize(value)
        if locale_id is None:
            logger.debug("Ignoring malformed locale preference %r", value)
        return locale_id

    def save(self, locale_id: LocaleId) -> bool:
        """Persist a locale choice.

        Args:
            locale_id: Locale to persist

        Returns:
            True if the store accepted the write, False if persistence failed
        """
        try:
            self._store.set(self._key, self.serialize(locale_id))
        except (PersistenceError, OSError) as e:
            logger.warning("Persisting locale preference %s failed: %s", locale_id, e)
            return False
        return True
