"""
Fetched dataset payloads.

These are the shapes written to the local cache, so they are pydantic
models: datetimes go out as ISO strings and come back as datetimes.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RawProductDataset(BaseModel):
    """Raw product rows exactly as the sheet endpoint returned them."""
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    fetched_at: datetime
    source: str = ""


class CampaignMetrics(BaseModel):
    clicks: float = 0
    impressions: float = 0
    conversions: float = 0
    roas: float = 0
    bounce_rate: float = 0
    ctr: float = 0
    spend: float = 0
    revenue: float = 0


class DailyData(BaseModel):
    date: str
    sessions: float = 0
    clicks: float = 0
    impressions: float = 0
    conversions: float = 0


class CampaignData(BaseModel):
    name: str
    clicks: float = 0
    impressions: float = 0
    conversions: float = 0
    spend: float = 0


class CampaignDataset(BaseModel):
    """Aggregated campaign sheet data."""
    metrics: CampaignMetrics = Field(default_factory=CampaignMetrics)
    daily_data: List[DailyData] = Field(default_factory=list)
    campaigns: List[CampaignData] = Field(default_factory=list)
    last_updated: Optional[datetime] = None
    source: str = ""
