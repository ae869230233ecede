"""Tests for BundleCache: fallback selection, memoization, coalescing, timeouts."""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor

import pytest

from localeengine.constants import MAX_LOAD_RESULTS
from localeengine.core import LocaleId
from localeengine.diagnostics import BundleNotFoundError
from localeengine.enums import LoadStatus
from localeengine.localization.loading import DictResourceProvider, FallbackInfo
from localeengine.runtime import BundleCache

EN_US = LocaleId("en", "US")
EN_GB = LocaleId("en", "GB")
ZH_CN = LocaleId("zh", "CN")


class CountingProvider:
    """Provider recording calls, optionally blocking until released."""

    def __init__(
        self,
        bundles: Mapping[LocaleId, Mapping[str, str]],
        gate: threading.Event | None = None,
        gated: frozenset[LocaleId] = frozenset(),
    ) -> None:
        self.bundles = bundles
        self.gate = gate
        self.gated = gated
        self.calls: Counter[LocaleId] = Counter()
        self.started = threading.Event()
        self._lock = threading.Lock()

    def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
        with self._lock:
            self.calls[locale_id] += 1
        self.started.set()
        if self.gate is not None and locale_id in self.gated:
            self.gate.wait(timeout=10)
        try:
            return self.bundles[locale_id]
        except KeyError:
            msg = f"no bundle for {locale_id}"
            raise BundleNotFoundError(msg) from None


class FlakyProvider:
    """Provider failing with OSError on the first call for selected locales."""

    def __init__(
        self, bundles: Mapping[LocaleId, Mapping[str, str]], flaky: frozenset[LocaleId]
    ) -> None:
        self.bundles = bundles
        self.flaky = flaky
        self.calls: Counter[LocaleId] = Counter()

    def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
        self.calls[locale_id] += 1
        if locale_id in self.flaky and self.calls[locale_id] == 1:
            msg = "transient read failure"
            raise OSError(msg)
        try:
            return self.bundles[locale_id]
        except KeyError:
            msg = f"no bundle for {locale_id}"
            raise BundleNotFoundError(msg) from None


def _wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestFallbackSelection:
    """Chain walk: exact, language-only, default."""

    def test_exact_bundle(self, sample_provider: DictResourceProvider) -> None:
        """An exact bundle is served directly."""
        with BundleCache(sample_provider) as cache:
            bundle = cache.get(EN_US)
        assert bundle.locale_id == EN_US
        assert bundle.lookup("greeting") == "Hi, {name}"

    def test_language_only_fallback(self, sample_provider: DictResourceProvider) -> None:
        """en_GB is served from the en bundle."""
        events: list[FallbackInfo] = []
        with BundleCache(sample_provider, on_fallback=events.append) as cache:
            bundle = cache.get(EN_GB)
        assert bundle.locale_id == LocaleId("en")
        assert events == [FallbackInfo(requested_locale=EN_GB, resolved_locale=LocaleId("en"))]

    def test_default_fallback(self, sample_provider: DictResourceProvider) -> None:
        """Unknown languages get the default locale's bundle."""
        with BundleCache(sample_provider) as cache:
            bundle = cache.get(LocaleId("fr", "FR"))
        assert bundle.locale_id == ZH_CN

    def test_configured_default(self, sample_provider: DictResourceProvider) -> None:
        """The default link is configurable."""
        with BundleCache(sample_provider, default_locale=LocaleId("ja", "JP")) as cache:
            assert cache.get(LocaleId("fr", "FR")).locale_id == LocaleId("ja", "JP")
            assert cache.default_locale == LocaleId("ja", "JP")

    def test_every_link_failing_gives_empty_bundle(self) -> None:
        """get() never returns None."""
        events: list[FallbackInfo] = []
        with BundleCache(DictResourceProvider({}), on_fallback=events.append) as cache:
            bundle = cache.get(EN_GB)
        assert bundle.is_empty
        assert events == [FallbackInfo(requested_locale=EN_GB, resolved_locale=None)]

    def test_no_fallback_event_for_exact_hit(self, sample_provider: DictResourceProvider) -> None:
        """on_fallback is not called when the requested locale loads."""
        events: list[FallbackInfo] = []
        with BundleCache(sample_provider, on_fallback=events.append) as cache:
            cache.get(ZH_CN)
        assert events == []

    def test_raising_fallback_callback_still_serves_bundle(
        self, sample_provider: DictResourceProvider, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failing on_fallback is logged; get() still returns the selected bundle."""

        def broken(info: FallbackInfo) -> None:
            msg = "callback bug"
            raise RuntimeError(msg)

        with (
            BundleCache(sample_provider, on_fallback=broken) as cache,
            caplog.at_level(logging.ERROR),
        ):
            bundle = cache.get(LocaleId("fr", "FR"))
        assert bundle.locale_id == ZH_CN
        assert "callback bug" in caplog.text


class TestMemoization:
    """Which outcomes are remembered."""

    def test_success_loaded_once(self) -> None:
        """A loaded bundle is reused without calling the provider again."""
        provider = CountingProvider({EN_US: {"a": "A"}})
        with BundleCache(provider) as cache:
            first = cache.get(EN_US)
            second = cache.get(EN_US)
        assert first is second
        assert provider.calls[EN_US] == 1
        assert cache.is_loaded(EN_US)
        assert cache.cached_locales() == (EN_US,)

    def test_not_found_memoized(self) -> None:
        """A missing chain link is not requested twice."""
        provider = CountingProvider({ZH_CN: {"a": "A"}})
        with BundleCache(provider) as cache:
            cache.get(EN_GB)
            cache.get(EN_GB)
        assert provider.calls[EN_GB] == 1
        assert provider.calls[LocaleId("en")] == 1
        assert provider.calls[ZH_CN] == 1

    def test_errors_are_retried(self) -> None:
        """A provider error falls back now and is retried on the next request."""
        provider = FlakyProvider({EN_US: {"a": "A"}, ZH_CN: {"a": "甲"}}, frozenset({EN_US}))
        with BundleCache(provider) as cache:
            first = cache.get(EN_US)
            second = cache.get(EN_US)
            summary = cache.get_load_summary()
        assert first.locale_id == ZH_CN
        assert second.locale_id == EN_US
        assert provider.calls[EN_US] == 2
        errors = summary.get_errors()
        assert [r.locale_id for r in errors] == [EN_US]
        assert isinstance(errors[0].error, OSError)

    def test_invalid_bundle_data_is_an_error(self) -> None:
        """Non-string templates are recorded as a load error, not served."""
        bundles = {"en_US": {"count": 3}, "zh_CN": {"a": "甲"}}
        provider = DictResourceProvider(bundles)  # type: ignore[arg-type]
        with BundleCache(provider) as cache:
            bundle = cache.get(EN_US)
            summary = cache.get_load_summary()
        assert bundle.locale_id == ZH_CN
        assert summary.get_by_locale(EN_US)[0].status is LoadStatus.ERROR

    def test_load_summary_records_entry_counts(self, sample_provider: DictResourceProvider) -> None:
        """Successful results carry the template count and source."""
        with BundleCache(sample_provider) as cache:
            cache.get(EN_US)
            result = cache.get_load_summary().get_by_locale(EN_US)[0]
        assert result.is_success
        assert result.entry_count == 3
        assert result.source == "memory:en_US"

    def test_load_log_is_bounded(self) -> None:
        """Retried failures do not grow the load summary without limit."""

        class RaisingProvider:
            def load_bundle(self, locale_id: LocaleId) -> Mapping[str, str]:
                msg = "backend down"
                raise RuntimeError(msg)

        with BundleCache(RaisingProvider()) as cache:
            for _ in range(200):
                assert cache.get(EN_US).is_empty
            summary = cache.get_load_summary()
        assert summary.total_attempted == MAX_LOAD_RESULTS
        assert summary.errors == MAX_LOAD_RESULTS

    def test_preload(self, sample_provider: DictResourceProvider) -> None:
        """preload() loads exact links without fallback."""
        with BundleCache(sample_provider) as cache:
            summary = cache.preload([EN_US, ZH_CN, LocaleId("ko", "KR")])
        assert summary.successful == 2
        assert summary.not_found == 1
        assert not summary.has_errors


class TestConcurrency:
    """At most one in-flight load per locale; bounded waits."""

    def test_concurrent_requests_coalesce(self) -> None:
        """Many callers asking for one locale cause a single provider call."""
        gate = threading.Event()
        provider = CountingProvider({EN_US: {"a": "A"}}, gate=gate, gated=frozenset({EN_US}))
        with BundleCache(provider) as cache, ThreadPoolExecutor(max_workers=8) as callers:
            futures = [callers.submit(cache.get, EN_US) for _ in range(8)]
            assert provider.started.wait(timeout=5)
            gate.set()
            bundles = [f.result(timeout=5) for f in futures]
        assert provider.calls[EN_US] == 1
        assert all(b is bundles[0] for b in bundles)
        assert bundles[0].locale_id == EN_US

    def test_timeout_falls_back_and_keeps_result(self) -> None:
        """A slow link times out for this call; its result is used once it arrives."""
        gate = threading.Event()
        provider = CountingProvider(
            {EN_US: {"a": "A"}, ZH_CN: {"a": "甲"}}, gate=gate, gated=frozenset({EN_US})
        )
        try:
            with BundleCache(provider, load_timeout=0.05) as cache:
                first = cache.get(EN_US)
                assert first.locale_id == ZH_CN
                summary = cache.get_load_summary()
                assert summary.get_by_locale(EN_US)[0].is_timeout
                assert summary.has_errors

                gate.set()
                assert _wait_until(lambda: cache.is_loaded(EN_US))
                assert cache.get(EN_US).locale_id == EN_US
                assert provider.calls[EN_US] == 1
        finally:
            gate.set()

    def test_external_executor_not_shut_down(self, sample_provider: DictResourceProvider) -> None:
        """close() leaves a caller-owned pool running."""
        with ThreadPoolExecutor(max_workers=1) as pool:
            cache = BundleCache(sample_provider, executor=pool)
            cache.get(EN_US)
            cache.close()
            assert pool.submit(lambda: 42).result(timeout=5) == 42

    def test_repr(self, sample_provider: DictResourceProvider) -> None:
        """repr shows loaded count and default."""
        with BundleCache(sample_provider) as cache:
            cache.get(EN_US)
            assert repr(cache) == "BundleCache(loaded=1, inflight=0, default=zh_CN)"
