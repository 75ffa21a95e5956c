"""
Shared API dependencies
"""
from datetime import date
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import HTTPException

from kampagnenradar.models.datasets import CampaignDataset, RawProductDataset
from kampagnenradar.services.data_fetch_service import (
    CachedFetchService,
    FetchResult,
    build_campaign_service,
    build_product_service,
)
from kampagnenradar.services.date_filter import DateRange


@lru_cache()
def get_product_service() -> CachedFetchService[RawProductDataset]:
    """Process-wide product fetch service (overridden in tests)"""
    return build_product_service()


@lru_cache()
def get_campaign_service() -> CachedFetchService[CampaignDataset]:
    """Process-wide campaign fetch service (overridden in tests)"""
    return build_campaign_service()


def parse_date_range(date_from: Optional[date], date_to: Optional[date]) -> DateRange:
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=400, detail="date_from must not be after date_to")
    return DateRange(date_from=date_from, date_to=date_to)


async def load_or_503(service: CachedFetchService, refresh: bool = False) -> FetchResult:
    """Load the dataset; 503 when neither a fetch nor the cache produced data."""
    result = await service.load(force_refresh=refresh)
    if not result.has_data:
        raise HTTPException(status_code=503, detail=result.error or "No data available")
    return result


def respond(data: Any, result: FetchResult) -> Dict[str, Any]:
    """Standard success envelope, flagged when serving a degraded cached copy."""
    response = {"success": True, "data": data}
    if result.stale:
        response["data_warning"] = f"{result.error}. Showing cached data."
    return response
