"""
Product Analytics API

Endpoints for product performance, stock health, SEO/ads recommendations,
the ROAS estimate and the per-shop breakdown.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from kampagnenradar.api.deps import get_product_service, load_or_503, parse_date_range, respond
from kampagnenradar.config import get_settings
from kampagnenradar.services.data_fetch_service import SUCCESS, CachedFetchService
from kampagnenradar.services.product_aggregation import variant_details
from kampagnenradar.services.product_analytics import parse_product_data
from kampagnenradar.services.product_table import (
    EXPORT_LANGUAGES,
    ProductQuery,
    export_products_csv,
    filter_products,
    query_products,
)
from kampagnenradar.utils.logger import log

settings = get_settings()

router = APIRouter(prefix="/products", tags=["products"])


async def _analytics(service: CachedFetchService, date_from, date_to, refresh: bool):
    date_range = parse_date_range(date_from, date_to)
    result = await load_or_503(service, refresh)
    dataset = result.data
    analytics = parse_product_data(dataset.rows, date_range, last_updated=dataset.fetched_at)
    return analytics, result


@router.get("/dashboard")
async def get_product_dashboard(
    date_from: Optional[date] = Query(None, description="Start date (inclusive)"),
    date_to: Optional[date] = Query(None, description="End date (inclusive)"),
    refresh: bool = Query(False, description="Bypass the cache"),
    service: CachedFetchService = Depends(get_product_service),
):
    """
    Complete product analytics dashboard

    Returns:
    - KPI metrics and stock health counts
    - Aggregated base products
    - Top and slow sellers, critical stock alerts
    - SEO opportunities and waste
    - ROAS estimate with suggestions and alerts
    - Shop breakdown
    """
    try:
        analytics, result = await _analytics(service, date_from, date_to, refresh)
        return respond(analytics.to_dict(), result)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error building product dashboard: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("")
async def list_products(
    status: str = Query("all", description="all, healthy, warning or critical"),
    search: str = Query("", description="Search base id or product name"),
    sort_by: str = Query("revenue", description="Sort field"),
    direction: str = Query("desc", description="asc or desc"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=500),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    refresh: bool = Query(False),
    service: CachedFetchService = Depends(get_product_service),
):
    """Filtered, sorted and paginated product table"""
    query = ProductQuery(
        status=status,
        search=search,
        sort_by=sort_by,
        direction=direction,
        page=page,
        page_size=page_size or settings.products_page_size,
    )
    try:
        query.validate()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        analytics, result = await _analytics(service, date_from, date_to, refresh)
        return respond(query_products(analytics.products, query), result)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error querying products: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/recommendations")
async def get_recommendations(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    refresh: bool = Query(False),
    service: CachedFetchService = Depends(get_product_service),
):
    """SEO opportunities and ad waste per base product"""
    try:
        analytics, result = await _analytics(service, date_from, date_to, refresh)
        return respond({
            "opportunities": [r.to_dict() for r in analytics.seo_opportunities],
            "waste": [r.to_dict() for r in analytics.seo_waste],
            "summary": {
                "opportunity_count": len(analytics.seo_opportunities),
                "waste_count": len(analytics.seo_waste),
            },
        }, result)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error building recommendations: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/roas")
async def get_roas(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    refresh: bool = Query(False),
    service: CachedFetchService = Depends(get_product_service),
):
    """
    Estimated ROAS summary

    Ad spend is an estimate (fixed share of revenue), not platform data.
    """
    try:
        analytics, result = await _analytics(service, date_from, date_to, refresh)
        return respond(analytics.roas.to_dict(), result)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error building ROAS summary: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/shops")
async def get_shops(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    refresh: bool = Query(False),
    service: CachedFetchService = Depends(get_product_service),
):
    """Revenue and product count per sales channel"""
    try:
        analytics, result = await _analytics(service, date_from, date_to, refresh)
        return respond([s.to_dict() for s in analytics.shops], result)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error building shop breakdown: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/export.csv")
async def export_products(
    language: str = Query("de", description="de or pt"),
    status: str = Query("all"),
    search: str = Query(""),
    sort_by: str = Query("revenue"),
    direction: str = Query("desc"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    refresh: bool = Query(False),
    service: CachedFetchService = Depends(get_product_service),
):
    """Semicolon-separated CSV of the filtered product table (UTF-8 with BOM)"""
    if language not in EXPORT_LANGUAGES:
        raise HTTPException(status_code=400, detail=f"Unsupported language '{language}'")
    query = ProductQuery(status=status, search=search, sort_by=sort_by, direction=direction)
    try:
        query.validate()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        analytics, _ = await _analytics(service, date_from, date_to, refresh)
        content = export_products_csv(filter_products(analytics.products, query), language)
        filename = f"products_{date.today().isoformat()}.csv"
        return Response(
            content=content,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error exporting products: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/refresh")
async def refresh_products(service: CachedFetchService = Depends(get_product_service)):
    """Force a fetch from the product sheet, bypassing the cache"""
    try:
        result = await service.load(force_refresh=True)
        if not result.has_data:
            raise HTTPException(status_code=503, detail=result.error or "No data available")
        return {
            "success": result.state == SUCCESS and not result.stale,
            "data": {
                **result.to_dict(),
                "rows": len(result.data.rows),
                "source": result.data.source,
                "fetched_at": result.data.fetched_at.isoformat(),
            },
        }
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error refreshing product data: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{base_id}/variants")
async def get_variants(
    base_id: str,
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    refresh: bool = Query(False),
    service: CachedFetchService = Depends(get_product_service),
):
    """Per-variant stock detail for one base product (not aggregated)"""
    try:
        date_range = parse_date_range(date_from, date_to)
        result = await load_or_503(service, refresh)
        variants = variant_details(result.data.rows, base_id, date_range)
        if not variants:
            raise HTTPException(status_code=404, detail=f"Base product '{base_id}' not found")
        return respond({"base_id": base_id, "variants": variants}, result)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error loading variants for {base_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
