"""
Health check and status endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from kampagnenradar import __version__
from kampagnenradar.api.deps import get_campaign_service, get_product_service
from kampagnenradar.config import get_settings
from kampagnenradar.services.data_fetch_service import CachedFetchService

settings = get_settings()

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": __version__
    }


@router.get("/status")
async def get_status(
    products: CachedFetchService = Depends(get_product_service),
    campaigns: CachedFetchService = Depends(get_campaign_service),
):
    """Get system status"""
    return {
        "app_name": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "data_sources": {
            "products": products.get_status(),
            "campaigns": campaigns.get_status(),
        },
        "cache": {
            "dir": settings.cache_dir,
            "ttl_seconds": settings.cache_ttl_seconds,
        },
        "timestamp": datetime.utcnow().isoformat()
    }
