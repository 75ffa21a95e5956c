"""
Campaign Performance API
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from kampagnenradar.api.deps import get_campaign_service, load_or_503, respond
from kampagnenradar.services.campaign_analytics import campaign_summary
from kampagnenradar.services.data_fetch_service import SUCCESS, CachedFetchService
from kampagnenradar.utils.logger import log

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.get("/dashboard")
async def get_campaign_dashboard(
    refresh: bool = Query(False, description="Bypass the cache"),
    service: CachedFetchService = Depends(get_campaign_service),
):
    """
    Campaign KPIs from the campaign sheet

    Returns:
    - Totals (clicks, impressions, conversions, spend, revenue, ROAS, CTR, bounce rate)
    - Daily series sorted by date
    - Per-campaign totals
    - Derived rates (conversion rate, CPC, cost per conversion)
    """
    try:
        result = await load_or_503(service, refresh)
        data = result.data.model_dump(mode="json")
        data["summary"] = campaign_summary(result.data)
        return respond(data, result)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error building campaign dashboard: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/refresh")
async def refresh_campaigns(service: CachedFetchService = Depends(get_campaign_service)):
    """Force a fetch from the campaign sheet, bypassing the cache"""
    try:
        result = await service.load(force_refresh=True)
        if not result.has_data:
            raise HTTPException(status_code=503, detail=result.error or "No data available")
        return {
            "success": result.state == SUCCESS and not result.stale,
            "data": {
                **result.to_dict(),
                "source": result.data.source,
                "campaigns": len(result.data.campaigns),
            },
        }
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error refreshing campaign data: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
