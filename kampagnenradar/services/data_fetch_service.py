"""
Data Fetch Service

Cached fetch orchestration shared by the product and campaign datasets:

  1. unless forced, a fresh cache entry is served without any request
  2. primary endpoint, then exactly one fallback attempt
  3. success is written through to the cache
  4. if both fail, whatever is cached (even stale) is served as a
     degraded result together with the error message

Every network fetch takes a new request token. Only the most recently
issued token may change state or the cache; a slower, older request that
finishes late is discarded.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

from kampagnenradar.config import Settings, get_settings
from kampagnenradar.connectors.base_connector import BaseConnector, ConnectorError
from kampagnenradar.connectors.campaign_sheet import CampaignSheetConnector
from kampagnenradar.connectors.product_sheet import ProductSheetConnector
from kampagnenradar.models.datasets import CampaignDataset, RawProductDataset
from kampagnenradar.utils.cache import CachePort, FileCache, is_fresh, now_millis
from kampagnenradar.utils.logger import log

P = TypeVar("P", bound=BaseModel)

# Fetch states
IDLE = "idle"
FETCHING = "fetching"
SUCCESS = "success"
FAILED = "failed"

PRODUCT_FETCH_ERROR = "Failed to fetch product data"
CAMPAIGN_FETCH_ERROR = "Failed to fetch data from both sources"


@dataclass
class FetchResult(Generic[P]):
    """Outcome of one load() call."""
    state: str
    data: Optional[P] = None
    error: Optional[str] = None
    from_cache: bool = False
    stale: bool = False
    superseded: bool = False
    token: int = 0

    @property
    def has_data(self) -> bool:
        return self.data is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state,
            "error": self.error,
            "from_cache": self.from_cache,
            "stale": self.stale,
            "superseded": self.superseded,
        }


class CachedFetchService(Generic[P]):
    """Primary/fallback fetch with a local cache and a request-sequence token."""

    def __init__(
        self,
        name: str,
        primary: Callable[[], Awaitable[P]],
        fallback: Callable[[], Awaitable[P]],
        cache: CachePort[P],
        ttl_seconds: float,
        error_message: str,
        connector: Optional[BaseConnector] = None,
    ):
        self.name = name
        self.connector = connector
        self._primary = primary
        self._fallback = fallback
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.error_message = error_message

        self.state = IDLE
        self.error: Optional[str] = None
        self.data: Optional[P] = None
        self.last_result: Optional[FetchResult[P]] = None
        self._issued_tokens = 0

    @property
    def latest_token(self) -> int:
        return self._issued_tokens

    def _issue_token(self) -> int:
        self._issued_tokens += 1
        return self._issued_tokens

    async def load(self, force_refresh: bool = False) -> FetchResult[P]:
        if not force_refresh:
            cached = self.cache.read()
            if is_fresh(cached, self.ttl_seconds):
                log.debug(f"{self.name}: serving fresh cache ({cached.age_seconds():.0f}s old)")
                result = FetchResult(
                    state=SUCCESS, data=cached.data, from_cache=True, token=self.latest_token,
                )
                # An in-flight fetch owns the service state until it settles
                if self.state == FETCHING:
                    return result
                return self._settle(result)

        token = self._issue_token()
        self.state = FETCHING
        self.error = None

        data = await self._fetch_with_fallback()

        if token != self.latest_token:
            log.debug(f"{self.name}: discarding response for superseded request #{token}")
            return FetchResult(
                state=self.state,
                data=self.data,
                error=self.error,
                superseded=True,
                token=token,
            )

        if data is not None:
            self.cache.write(data)
            return self._settle(FetchResult(state=SUCCESS, data=data, token=token))

        cached = self.cache.read()
        if cached is not None:
            log.warning(
                f"{self.name}: serving stale cache ({cached.age_seconds():.0f}s old) after failed fetch"
            )
            return self._settle(FetchResult(
                state=SUCCESS,
                data=cached.data,
                error=self.error_message,
                from_cache=True,
                stale=True,
                token=token,
            ))

        log.error(f"{self.name}: {self.error_message}, no cached data available")
        return self._settle(FetchResult(state=FAILED, error=self.error_message, token=token))

    async def _fetch_with_fallback(self) -> Optional[P]:
        try:
            return await self._primary()
        except ConnectorError as e:
            log.warning(f"{self.name}: primary fetch failed ({e}), trying fallback")
        try:
            return await self._fallback()
        except ConnectorError as e:
            log.error(f"{self.name}: fallback fetch failed: {e}")
            return None

    def _settle(self, result: FetchResult[P]) -> FetchResult[P]:
        self.state = result.state
        self.error = result.error
        if result.data is not None:
            self.data = result.data
        self.last_result = result
        return result

    def get_status(self) -> Dict[str, Any]:
        cached = self.cache.read()
        return {
            "name": self.name,
            "state": self.state,
            "error": self.error,
            "requests_issued": self.latest_token,
            "cache_key": self.cache.key,
            "cache_age_seconds": round(cached.age_seconds(now_millis()), 1) if cached else None,
            "cache_fresh": is_fresh(cached, self.ttl_seconds),
            "connector": self.connector.get_status() if self.connector else None,
        }


def _connector_service(
    name: str,
    connector: BaseConnector,
    cache: CachePort[P],
    ttl_seconds: float,
    error_message: str,
) -> CachedFetchService[P]:
    return CachedFetchService(
        name=name,
        primary=connector.fetch_primary,
        fallback=connector.fetch_fallback,
        cache=cache,
        ttl_seconds=ttl_seconds,
        error_message=error_message,
        connector=connector,
    )


def build_product_service(
    settings: Optional[Settings] = None,
    connector: Optional[ProductSheetConnector] = None,
    cache: Optional[CachePort[RawProductDataset]] = None,
) -> CachedFetchService[RawProductDataset]:
    settings = settings or get_settings()
    return _connector_service(
        "products",
        connector or ProductSheetConnector(),
        cache or FileCache(settings.product_cache_key, RawProductDataset, settings.cache_dir),
        settings.cache_ttl_seconds,
        PRODUCT_FETCH_ERROR,
    )


def build_campaign_service(
    settings: Optional[Settings] = None,
    connector: Optional[CampaignSheetConnector] = None,
    cache: Optional[CachePort[CampaignDataset]] = None,
) -> CachedFetchService[CampaignDataset]:
    settings = settings or get_settings()
    return _connector_service(
        "campaigns",
        connector or CampaignSheetConnector(),
        cache or FileCache(settings.campaign_cache_key, CampaignDataset, settings.cache_dir),
        settings.cache_ttl_seconds,
        CAMPAIGN_FETCH_ERROR,
    )
