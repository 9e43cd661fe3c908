import pytest
from django.core.cache import cache
from records.memory import InMemoryRecordStore
from records.store import set_record_store


@pytest.fixture(autouse=True, scope="session")
def _load_throttle_rates():
    """Import DRF throttling before any test overrides settings.

    ``SimpleRateThrottle.THROTTLE_RATES`` is bound once at import time, so a
    first import inside a test that overrides ``REST_FRAMEWORK`` would leak
    that test's rates into the rest of the run.
    """
    import rest_framework.throttling  # noqa: F401


@pytest.fixture(autouse=True)
def record_store():
    """Fresh in-memory record store per test."""
    store = InMemoryRecordStore()
    set_record_store(store)
    yield store
    set_record_store(None)


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()
