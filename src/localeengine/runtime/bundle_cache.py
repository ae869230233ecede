"""Memoizing resource bundle cache with fallback-chain selection.

Architecture:
    - Provider calls run on a small thread pool owned by the cache
    - At most one in-flight load per LocaleId; concurrent callers wait on
      the same Future
    - Waits are bounded by load_timeout; a timed-out link counts as failed
      for that call, while the load keeps running and its result is kept
    - Successful and not-found outcomes are memoized for the process
      lifetime (bundle count is bounded by the catalog); errors and
      timeouts are retried on the next request
    - get() never fails: when every chain link fails, an empty bundle is
      returned and callers echo keys

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Iterable
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor

from localeengine.constants import (
    DEFAULT_LOAD_TIMEOUT,
    DEFAULT_LOADER_WORKERS,
    DEFAULT_LOCALE_TAG,
    MAX_LOAD_RESULTS,
)
from localeengine.core.locale_id import LocaleId, fallback_chain
from localeengine.diagnostics import BundleNotFoundError
from localeengine.enums import LoadStatus
from localeengine.localization.loading import (
    FallbackInfo,
    LoadSummary,
    ResourceLoadResult,
    ResourceProvider,
)
from localeengine.runtime.bundle import ResourceBundle

__all__ = ["BundleCache"]

logger = logging.getLogger(__name__)

_DEFAULT_LOCALE = LocaleId.parse(DEFAULT_LOCALE_TAG)


class BundleCache:
    """Loads, memoizes and selects per-locale resource bundles.

    Selection walks the fallback chain: exact locale, language-only
    locale, configured default. The first link with a bundle wins.

    Thread Safety:
        All public methods are thread-safe. Loaded bundles are immutable
        and shared between callers.

    Example:
        >>> from localeengine.localization.loading import DictResourceProvider
        >>> provider = DictResourceProvider({
        ...     "en": {"greeting": "Hello"},
        ...     "zh_CN": {"greeting": "你好"},
        ... })
        >>> with BundleCache(provider) as cache:
        ...     bundle = cache.get(LocaleId("en", "GB"))
        ...     bundle.locale_id, bundle.lookup("greeting")
        (LocaleId(language='en', region=None), 'Hello')
    """

    __slots__ = (
        "_default_locale",
        "_executor",
        "_inflight",
        "_load_timeout",
        "_loaded",
        "_lock",
        "_on_fallback",
        "_owns_executor",
        "_provider",
        "_results",
    )

    def __init__(
        self,
        provider: ResourceProvider,
        *,
        default_locale: LocaleId = _DEFAULT_LOCALE,
        load_timeout: float | None = DEFAULT_LOAD_TIMEOUT,
        max_workers: int = DEFAULT_LOADER_WORKERS,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize bundle cache.

        Args:
            provider: External resource provider
            default_locale: Last link of every fallback chain (default: zh_CN)
            load_timeout: Seconds to wait for one load; None waits indefinitely
            max_workers: Loader pool size (ignored when executor is given)
            on_fallback: Optional callback invoked when a bundle is served from
                a later chain link than requested (or the empty bundle is used)
            executor: Externally owned pool for provider calls (not shut down by close())
        """
        self._provider = provider
        self._default_locale = default_locale
        self._load_timeout = load_timeout
        self._on_fallback = on_fallback
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="bundle-loader"
        )
        self._lock = threading.Lock()
        # None marks a memoized "bundle missing" outcome
        self._loaded: dict[LocaleId, ResourceBundle | None] = {}
        self._inflight: dict[LocaleId, Future[ResourceBundle | None]] = {}
        self._results: deque[ResourceLoadResult] = deque(maxlen=MAX_LOAD_RESULTS)

    @property
    def default_locale(self) -> LocaleId:
        """Last link of every fallback chain."""
        return self._default_locale

    def get(self, locale_id: LocaleId) -> ResourceBundle:
        """Get the bundle for a locale, walking the fallback chain.

        Args:
            locale_id: Requested locale

        Returns:
            Bundle of the first chain link that loads; an empty bundle if
            every link fails (never None)
        """
        for link in fallback_chain(locale_id, self._default_locale):
            bundle = self._load_link(link)
            if bundle is not None:
                if link != locale_id:
                    self._notify_fallback(locale_id, link)
                return bundle

        logger.warning("No bundle available for %s or its fallbacks; using empty bundle", locale_id)
        self._notify_fallback(locale_id, None)
        return ResourceBundle.empty()

    def preload(self, locale_ids: Iterable[LocaleId]) -> LoadSummary:
        """Start loads for several locales and wait for them.

        Args:
            locale_ids: Locales to load (exact links only, no fallback)

        Returns:
            LoadSummary of all attempts recorded so far
        """
        futures = [(locale_id, self._submit(locale_id)) for locale_id in locale_ids]
        for locale_id, future in futures:
            if future is not None:
                self._wait(locale_id, future)
        return self.get_load_summary()

    def is_loaded(self, locale_id: LocaleId) -> bool:
        """Check if a bundle for exactly this locale is memoized."""
        with self._lock:
            return self._loaded.get(locale_id) is not None

    def cached_locales(self) -> tuple[LocaleId, ...]:
        """Get locales with a memoized bundle, in load order."""
        with self._lock:
            return tuple(k for k, v in self._loaded.items() if v is not None)

    def get_load_summary(self) -> LoadSummary:
        """Get summary of the most recent provider attempts (at most MAX_LOAD_RESULTS)."""
        with self._lock:
            return LoadSummary(results=tuple(self._results))

    def close(self) -> None:
        """Shut down the loader pool if the cache owns it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> BundleCache:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        with self._lock:
            loaded = sum(1 for v in self._loaded.values() if v is not None)
            inflight = len(self._inflight)
        return f"BundleCache(loaded={loaded}, inflight={inflight}, default={self._default_locale})"

    def _load_link(self, locale_id: LocaleId) -> ResourceBundle | None:
        with self._lock:
            if locale_id in self._loaded:
                return self._loaded[locale_id]
        future = self._submit(locale_id)
        if future is None:
            with self._lock:
                return self._loaded.get(locale_id)
        return self._wait(locale_id, future)

    def _submit(self, locale_id: LocaleId) -> Future[ResourceBundle | None] | None:
        """Get the in-flight load for a locale, starting one if needed.

        Returns:
            Future of the load, or None if the outcome is already memoized
        """
        with self._lock:
            if locale_id in self._loaded:
                return None
            future = self._inflight.get(locale_id)
            if future is None:
                future = self._executor.submit(self._load_and_store, locale_id)
                self._inflight[locale_id] = future
            return future

    def _wait(
        self, locale_id: LocaleId, future: Future[ResourceBundle | None]
    ) -> ResourceBundle | None:
        started = time.monotonic()
        try:
            return future.result(timeout=self._load_timeout)
        except TimeoutError:
            logger.warning(
                "Loading bundle for %s exceeded %.2fs; treating as unavailable",
                locale_id,
                self._load_timeout,
            )
            self._record(
                ResourceLoadResult(
                    locale_id=locale_id,
                    status=LoadStatus.TIMEOUT,
                    source=self._describe(locale_id),
                    duration=time.monotonic() - started,
                )
            )
            return None
        except CancelledError:
            with self._lock:
                self._inflight.pop(locale_id, None)
            logger.warning("Loading bundle for %s was cancelled", locale_id)
            return None

    def _load_and_store(self, locale_id: LocaleId) -> ResourceBundle | None:
        """Run one provider call on the loader pool and publish its outcome."""
        source = self._describe(locale_id)
        started = time.monotonic()
        bundle: ResourceBundle | None = None
        memoize = False
        try:
            data = self._provider.load_bundle(locale_id)
            bundle = ResourceBundle.from_mapping(locale_id, data)
            memoize = True
            result = ResourceLoadResult(
                locale_id=locale_id,
                status=LoadStatus.SUCCESS,
                source=source,
                duration=time.monotonic() - started,
                entry_count=len(bundle),
            )
            logger.debug("Loaded %d templates for %s from %s", len(bundle), locale_id, source)
        except (BundleNotFoundError, FileNotFoundError):
            memoize = True
            result = ResourceLoadResult(
                locale_id=locale_id,
                status=LoadStatus.NOT_FOUND,
                source=source,
                duration=time.monotonic() - started,
            )
            logger.debug("No bundle for %s at %s", locale_id, source)
        except Exception as e:  # noqa: BLE001 - provider is external code; failure degrades
            result = ResourceLoadResult(
                locale_id=locale_id,
                status=LoadStatus.ERROR,
                error=e,
                source=source,
                duration=time.monotonic() - started,
            )
            logger.warning("Loading bundle for %s from %s failed: %s", locale_id, source, e)
        finally:
            with self._lock:
                self._inflight.pop(locale_id, None)
                if memoize:
                    self._loaded[locale_id] = bundle

        self._record(result)
        return bundle

    def _record(self, result: ResourceLoadResult) -> None:
        with self._lock:
            self._results.append(result)

    def _describe(self, locale_id: LocaleId) -> str:
        describe = getattr(self._provider, "describe", None)
        return describe(locale_id) if callable(describe) else str(locale_id)

    def _notify_fallback(self, requested: LocaleId, resolved: LocaleId | None) -> None:
        if self._on_fallback is None:
            return
        try:
            self._on_fallback(FallbackInfo(requested_locale=requested, resolved_locale=resolved))
        except Exception:  # noqa: BLE001 - callback is external code; bundle already selected
            logger.exception("Fallback callback %r failed for %s", self._on_fallback, requested)
