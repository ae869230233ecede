"""Session-owned active locale with atomic switching.

LocaleSession ties the pipeline together: the saved preference and the
device locale resolve to the active locale, whose bundle, format engine and
plural selector are built into one immutable LocaleState.

Key architectural decisions:
- Explicitly owned context: callers read ``session.state`` instead of a
  process-wide current locale
- A locale change builds the complete new state off to the side and
  publishes it with one reference assignment; readers observe either the
  old state or the new one, never a mix
- Writers are serialized by a lock; readers take no lock
- Persistence runs after publication and its failure never rolls back the
  switch; LocaleChange.persisted reports it

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TypeAlias

from localeengine.catalog import DEFAULT_CATALOG, LocaleCatalog, LocaleEntry
from localeengine.config import DEFAULT_CONFIG, EngineConfig
from localeengine.core.locale_id import LocaleId
from localeengine.enums import (
    ERROR_KIND_KEYS,
    TRANSACTION_KIND_KEYS,
    ErrorKind,
    TransactionKind,
)
from localeengine.localization.loading import (
    FallbackInfo,
    LoadSummary,
    PackageResourceProvider,
    ResourceProvider,
)
from localeengine.localization.preferences import (
    InMemoryPreferenceStore,
    PreferenceGateway,
    PreferenceStore,
)
from localeengine.localization.resolver import resolve_locale
from localeengine.runtime.bundle import ResourceBundle
from localeengine.runtime.bundle_cache import BundleCache
from localeengine.runtime.format_engine import FormatEngine
from localeengine.runtime.format_spec import FormatSpec
from localeengine.runtime.names import localized_name
from localeengine.runtime.plural_rules import PluralSelector

__all__ = ["LocaleChange", "LocaleSession", "LocaleState"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocaleState:
    """Everything derived from the active locale, published as one unit.

    Attributes:
        locale_id: Active locale
        entry: Catalog entry of the active locale (None if the configured
            default is not in the catalog)
        engine: Formatter bound to the active locale
        plurals: Plural selector bound to the active locale
        bundle: Bundle selected through the fallback chain
    """

    locale_id: LocaleId
    entry: LocaleEntry | None
    engine: FormatEngine
    plurals: PluralSelector
    bundle: ResourceBundle

    @property
    def spec(self) -> FormatSpec:
        """Formatting rules of the active locale."""
        return self.engine.spec


@dataclass(frozen=True, slots=True)
class LocaleChange:
    """Outcome of LocaleSession.change_locale().

    Attributes:
        previous: Locale active before the change (None on first start)
        current: Locale active after the change
        persisted: False if the preference store rejected the write
    """

    previous: LocaleId | None
    current: LocaleId
    persisted: bool

    @property
    def changed(self) -> bool:
        """Check if the active locale actually changed."""
        return self.previous != self.current


ChangeListener: TypeAlias = Callable[[LocaleState], None]


class LocaleSession:
    """Active locale of one application session.

    Example:
        >>> from localeengine.localization.loading import DictResourceProvider
        >>> provider = DictResourceProvider({
        ...     "en": {"greeting": "Hello {name}"},
        ...     "zh_CN": {"greeting": "你好，{name}"},
        ... })
        >>> with LocaleSession(provider=provider) as session:
        ...     _ = session.start(LocaleId("en", "GB"))
        ...     session.translate("greeting", name="Ana")
        'Hello Ana'

    Thread Safety:
        ``state`` and every lookup/formatting helper may be called from any
        thread while a locale change is in progress.
    """

    __slots__ = (
        "_cache",
        "_catalog",
        "_config",
        "_gateway",
        "_listeners",
        "_state",
        "_write_lock",
    )

    def __init__(
        self,
        catalog: LocaleCatalog = DEFAULT_CATALOG,
        provider: ResourceProvider | None = None,
        store: PreferenceStore | None = None,
        *,
        config: EngineConfig = DEFAULT_CONFIG,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize session. No locale is active until start().

        Args:
            catalog: Supported locales (default: the five shipped locales)
            provider: Resource provider (default: bundles shipped in the package)
            store: Preference store (default: in-memory, not persisted)
            config: Engine configuration
            on_fallback: Optional callback for bundle fallback events
            executor: Externally owned pool for provider calls
        """
        self._catalog = catalog
        self._config = config
        self._gateway = PreferenceGateway(
            store if store is not None else InMemoryPreferenceStore(),
            key=config.preference_key,
        )
        self._cache = BundleCache(
            provider if provider is not None else PackageResourceProvider(),
            default_locale=config.default_locale,
            load_timeout=config.load_timeout,
            max_workers=config.max_loader_workers,
            on_fallback=on_fallback,
            executor=executor,
        )
        self._write_lock = threading.Lock()
        self._listeners: list[ChangeListener] = []
        self._state: LocaleState | None = None

    @property
    def catalog(self) -> LocaleCatalog:
        """Supported locales."""
        return self._catalog

    @property
    def config(self) -> EngineConfig:
        """Engine configuration."""
        return self._config

    @property
    def started(self) -> bool:
        """Check if start() has published a state."""
        return self._state is not None

    @property
    def state(self) -> LocaleState:
        """Currently published locale state.

        Raises:
            RuntimeError: If start() has not been called
        """
        state = self._state
        if state is None:
            msg = "LocaleSession.start() must be called before using the session"
            raise RuntimeError(msg)
        return state

    @property
    def locale_id(self) -> LocaleId:
        """Active locale."""
        return self.state.locale_id

    @property
    def engine(self) -> FormatEngine:
        """Formatter for the active locale."""
        return self.state.engine

    def start(self, device_locale: LocaleId | None = None) -> LocaleState:
        """Resolve the active locale and publish its state.

        Args:
            device_locale: Locale reported by the device, e.g. from
                detect_device_locale() (None if unknown)

        Returns:
            Published state
        """
        saved = self._gateway.load()
        resolved = resolve_locale(
            device_locale,
            saved,
            self._catalog,
            default=self._config.default_locale,
        )
        state = self._build_state(resolved)
        with self._write_lock:
            self._state = state
        logger.info(
            "Locale session started with %s (device=%s, saved=%s)", resolved, device_locale, saved
        )
        self._notify(state)
        return state

    def change_locale(self, locale_id: LocaleId) -> LocaleChange:
        """Switch the active locale and persist the choice.

        Args:
            locale_id: New locale; must be in the catalog

        Returns:
            LocaleChange; ``persisted`` is False if the store write failed

        Raises:
            ValueError: If locale_id is not in the catalog
        """
        if self._catalog.find(locale_id) is None:
            msg = f"Locale '{locale_id}' is not in the catalog"
            raise ValueError(msg)

        state = self._build_state(locale_id)
        with self._write_lock:
            previous = self._state
            self._state = state
        previous_id = previous.locale_id if previous is not None else None
        logger.info("Locale changed from %s to %s", previous_id, locale_id)
        self._notify(state)

        persisted = self._gateway.save(locale_id)
        return LocaleChange(previous=previous_id, current=locale_id, persisted=persisted)

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener called with each newly published state.

        Args:
            listener: Callable receiving the new LocaleState

        Returns:
            Callable that unregisters the listener
        """
        with self._write_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._write_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def translate(self, key: str, count: int | float | None = None, **values: object) -> str:
        """Render the template for a key in the active locale.

        Args:
            key: Bundle key
            count: Count for plural blocks and ``{count}``
            **values: Placeholder values

        Returns:
            Rendered text, or the key itself when no bundle in the chain has it
        """
        state = self.state
        template = state.bundle.lookup(key)
        if template is None:
            logger.debug("Key '%s' missing for %s; echoing key", key, state.locale_id)
            return key
        return state.plurals.render(template, count, values)

    def describe_error(self, kind: ErrorKind | str) -> str:
        """Get the user-facing description of an error kind.

        Raises:
            ValueError: If kind is not an ErrorKind value
        """
        return self.translate(ERROR_KIND_KEYS[ErrorKind(kind)])

    def describe_transaction_kind(self, kind: TransactionKind | str) -> str:
        """Get the display name of a transaction kind.

        Raises:
            ValueError: If kind is not a TransactionKind value
        """
        return self.translate(TRANSACTION_KIND_KEYS[TransactionKind(kind)])

    def localized_name(
        self,
        domain_key: str,
        map_by_locale: Mapping[str, Mapping[str, str]] | None = None,
    ) -> str:
        """Get the display name of a domain key.

        Without a map, names come from the active bundle, so bundle data
        such as ``category.food`` is the single source of display names.

        Args:
            domain_key: Key to name (e.g., "category.food")
            map_by_locale: Optional locale string -> key -> name tables

        Returns:
            Display name, or domain_key itself when none is found
        """
        state = self.state
        if map_by_locale is not None:
            return localized_name(domain_key, map_by_locale, state.locale_id)
        name = state.bundle.lookup(domain_key)
        return name if name is not None else domain_key

    def get_load_summary(self) -> LoadSummary:
        """Get summary of every bundle load attempt in this session."""
        return self._cache.get_load_summary()

    def close(self) -> None:
        """Release the bundle loader pool."""
        self._cache.close()

    def __enter__(self) -> LocaleSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = self._state
        active = state.locale_id if state is not None else None
        return f"LocaleSession(locale={active}, catalog={len(self._catalog)} locales)"

    def _build_state(self, locale_id: LocaleId) -> LocaleState:
        engine = FormatEngine.create(locale_id)
        return LocaleState(
            locale_id=locale_id,
            entry=self._catalog.find(locale_id),
            engine=engine,
            plurals=PluralSelector(
                locale_id,
                no_plural_languages=self._config.no_plural_languages,
                count_formatter=engine.format_number,
            ),
            bundle=self._cache.get(locale_id),
        )

    def _notify(self, state: LocaleState) -> None:
        with self._write_lock:
            listeners = tuple(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception:  # noqa: BLE001 - listener is external code; switch already published
                logger.exception("Locale change listener %r failed", listener)
