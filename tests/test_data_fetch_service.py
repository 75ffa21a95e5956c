"""
Cached fetch orchestration: cache freshness, primary/fallback, degraded
stale results and the request-sequence token.

Connectors are replaced by small async fakes; no network is touched.
"""
import asyncio
from datetime import datetime

from kampagnenradar.connectors.base_connector import ConnectorError
from kampagnenradar.models.datasets import RawProductDataset
from kampagnenradar.services.data_fetch_service import (
    FAILED,
    FETCHING,
    IDLE,
    PRODUCT_FETCH_ERROR,
    SUCCESS,
    CachedFetchService,
)
from kampagnenradar.utils.cache import MemoryCache, now_millis


def _run(coro):
    """Run an async coroutine in a sync test."""
    return asyncio.run(coro)


def _dataset(source, rows=None):
    return RawProductDataset(
        rows=rows if rows is not None else [{"sku": "A-1", "revenue": 10}],
        fetched_at=datetime(2026, 10, 18, 10, 0),
        source=source,
    )


class FakeSource:
    """Async callable returning a dataset or raising ConnectorError."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.error:
            raise ConnectorError(self.error)
        return self.result


def _service(primary, fallback, cache=None, ttl=300):
    return CachedFetchService(
        name="products",
        primary=primary,
        fallback=fallback,
        cache=cache or MemoryCache("kampagnenradar_product_data", RawProductDataset),
        ttl_seconds=ttl,
        error_message=PRODUCT_FETCH_ERROR,
    )


def test_initial_state_is_idle():
    service = _service(FakeSource(_dataset("primary")), FakeSource(_dataset("fallback")))
    assert service.state == IDLE
    assert service.latest_token == 0


def test_primary_success_writes_through():
    primary = FakeSource(_dataset("primary"))
    fallback = FakeSource(_dataset("fallback"))
    service = _service(primary, fallback)

    result = _run(service.load())

    assert result.state == SUCCESS
    assert result.data.source == "primary"
    assert not result.from_cache
    assert fallback.calls == 0
    assert service.cache.read().data.source == "primary"
    assert service.state == SUCCESS


def test_fresh_cache_skips_fetch():
    cache = MemoryCache("kampagnenradar_product_data", RawProductDataset)
    cache.write(_dataset("cached"))
    primary = FakeSource(_dataset("primary"))
    service = _service(primary, FakeSource(_dataset("fallback")), cache=cache)

    result = _run(service.load())

    assert result.from_cache
    assert result.data.source == "cached"
    assert primary.calls == 0
    assert service.latest_token == 0


def test_expired_cache_is_refetched():
    cache = MemoryCache(
        "kampagnenradar_product_data", RawProductDataset, clock=lambda: now_millis() - 600_000
    )
    cache.write(_dataset("old"))
    primary = FakeSource(_dataset("primary"))
    service = _service(primary, FakeSource(_dataset("fallback")), cache=cache)

    result = _run(service.load())

    assert primary.calls == 1
    assert result.data.source == "primary"


def test_force_refresh_bypasses_fresh_cache():
    cache = MemoryCache("kampagnenradar_product_data", RawProductDataset)
    cache.write(_dataset("cached"))
    primary = FakeSource(_dataset("primary"))
    service = _service(primary, FakeSource(_dataset("fallback")), cache=cache)

    result = _run(service.load(force_refresh=True))

    assert primary.calls == 1
    assert result.data.source == "primary"


def test_fallback_used_once_after_primary_failure():
    primary = FakeSource(error="timeout")
    fallback = FakeSource(_dataset("fallback"))
    service = _service(primary, fallback)

    result = _run(service.load())

    assert (primary.calls, fallback.calls) == (1, 1)
    assert result.state == SUCCESS
    assert result.data.source == "fallback"
    assert service.cache.read().data.source == "fallback"


def test_both_fail_without_cache():
    service = _service(FakeSource(error="down"), FakeSource(error="down too"))

    result = _run(service.load())

    assert result.state == FAILED
    assert result.data is None
    assert not result.has_data
    assert result.error == PRODUCT_FETCH_ERROR
    assert service.state == FAILED


def test_both_fail_serves_stale_cache():
    cache = MemoryCache(
        "kampagnenradar_product_data", RawProductDataset, clock=lambda: now_millis() - 3_600_000
    )
    cache.write(_dataset("yesterday"))
    service = _service(FakeSource(error="down"), FakeSource(error="down too"), cache=cache)

    result = _run(service.load())

    assert result.has_data
    assert result.data.source == "yesterday"
    assert result.stale
    assert result.from_cache
    assert result.error == PRODUCT_FETCH_ERROR


def test_stale_token_response_is_discarded():
    async def scenario():
        release_first = asyncio.Event()
        calls = []

        async def primary():
            calls.append(len(calls) + 1)
            if len(calls) == 1:
                # The first request is slow and finishes after the second
                await release_first.wait()
                return _dataset("slow-first")
            return _dataset("fast-second")

        service = _service(primary, FakeSource(error="unused"))

        first = asyncio.ensure_future(service.load(force_refresh=True))
        await asyncio.sleep(0)
        second = await service.load(force_refresh=True)
        release_first.set()
        first_result = await first
        return service, first_result, second

    service, first_result, second = _run(scenario())

    assert second.data.source == "fast-second"
    assert first_result.superseded
    # The late response must not overwrite state or cache
    assert service.data.source == "fast-second"
    assert service.cache.read().data.source == "fast-second"
    assert service.latest_token == 2


def test_fresh_cache_read_leaves_running_fetch_state_alone():
    async def scenario():
        release = asyncio.Event()

        async def primary():
            await release.wait()
            return _dataset("refreshed")

        cache = MemoryCache("kampagnenradar_product_data", RawProductDataset)
        cache.write(_dataset("cached"))
        service = _service(primary, FakeSource(error="unused"), cache=cache)

        refresh = asyncio.ensure_future(service.load(force_refresh=True))
        await asyncio.sleep(0)
        cached = await service.load()
        state_during_fetch = service.state
        release.set()
        await refresh
        return service, cached, state_during_fetch

    service, cached, state_during_fetch = _run(scenario())

    assert cached.from_cache
    assert cached.data.source == "cached"
    assert state_during_fetch == FETCHING
    assert service.state == SUCCESS
    assert service.data.source == "refreshed"


def test_status_reports_cache_and_state():
    service = _service(FakeSource(_dataset("primary")), FakeSource(_dataset("fallback")))
    _run(service.load())
    status = service.get_status()
    assert status["state"] == SUCCESS
    assert status["cache_key"] == "kampagnenradar_product_data"
    assert status["cache_fresh"] is True
    assert status["requests_issued"] == 1
