"""Shared pytest setup: Hypothesis profiles, locale constants, fixtures.

Hypothesis example budgets live here and nowhere else:
    dev      200 examples, random seed (default)
    ci        50 examples, derandomized; chosen when CI=true
    verbose  100 examples with per-example output

HYPOTHESIS_PROFILE=<name> picks a profile explicitly, e.g.
``HYPOTHESIS_PROFILE=verbose pytest tests/test_resolver.py``.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from hypothesis import Phase, Verbosity, settings

from localeengine.localization.loading import DictResourceProvider
from localeengine.runtime import FormatEngine

# =============================================================================
# HYPOTHESIS PROFILES
# =============================================================================

_ALL_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]
_PROFILES = ("dev", "ci", "verbose")

settings.register_profile("dev", max_examples=200, phases=_ALL_PHASES)
settings.register_profile(
    "ci", max_examples=50, phases=_ALL_PHASES, derandomize=True, print_blob=True
)
settings.register_profile(
    "verbose", max_examples=100, phases=_ALL_PHASES, verbosity=Verbosity.verbose
)


def _select_profile() -> str:
    requested = os.environ.get("HYPOTHESIS_PROFILE", "")
    if requested in _PROFILES:
        return requested
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_select_profile())


# =============================================================================
# SHARED FIXTURES
# =============================================================================

SAMPLE_BUNDLES: dict[str, dict[str, str]] = {
    "zh_CN": {
        "greeting": "你好，{name}",
        "items": "{count, plural, =0{没有项目} other{# 个项目}}",
        "category.food": "餐饮",
    },
    "en": {
        "greeting": "Hello, {name}",
        "items": "{count, plural, =0{No items} one{# item} other{# items}}",
        "category.food": "Food",
    },
    "en_US": {
        "greeting": "Hi, {name}",
        "items": "{count, plural, =0{No items} one{# item} other{# items}}",
        "category.food": "Food",
    },
    "ja_JP": {
        "greeting": "こんにちは、{name}さん",
        "items": "{count, plural, other{# 件}}",
    },
}


@pytest.fixture(autouse=True)
def _clear_engine_cache() -> Iterator[None]:
    """Isolate tests from FormatEngine instances created by other tests."""
    FormatEngine.clear_cache()
    yield
    FormatEngine.clear_cache()


@pytest.fixture
def sample_provider() -> DictResourceProvider:
    """In-memory provider holding SAMPLE_BUNDLES."""
    return DictResourceProvider(SAMPLE_BUNDLES)
