"""
Campaign Analytics

Turns the campaign sheet (CSV export or JSON API answer) into a
CampaignDataset: overall metrics, a per-day series and per-campaign totals.

Columns are found by substring match on the lower-cased header; the first
header containing any of the needles wins.
"""
import io
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd
from pydantic import ValidationError

from kampagnenradar.models.datasets import (
    CampaignData,
    CampaignDataset,
    CampaignMetrics,
    DailyData,
)
from kampagnenradar.utils.helpers import safe_divide, to_number, to_text
from kampagnenradar.utils.logger import log

# Reported when the sheet has no bounce-rate values at all
DEFAULT_BOUNCE_RATE = 42.3

# Budget what-ifs for the best and worst campaign by cost per conversion
BUDGET_CUT_RATIO = 0.20
BUDGET_RAISE_RATIO = 0.15

HEADER_NEEDLES: Dict[str, Sequence[str]] = {
    "clicks": ("click",),
    "impressions": ("impression",),
    "conversions": ("conversion",),
    "roas": ("roas",),
    "bounce": ("bounce",),
    "ctr": ("ctr",),
    "spend": ("spend", "cost"),
    "revenue": ("revenue",),
    "date": ("date", "day"),
    "sessions": ("session",),
    "campaign": ("campaign", "name"),
}


class CampaignParseError(ValueError):
    """The campaign payload cannot be turned into a dataset."""


def find_header(headers: Sequence[str], needles: Sequence[str]) -> Optional[str]:
    for header in headers:
        lowered = str(header).lower().strip()
        if any(needle in lowered for needle in needles):
            return header
    return None


def read_campaign_csv(csv_text: str) -> pd.DataFrame:
    """CSV text -> DataFrame of strings. Empty input gives an empty frame."""
    if not csv_text or not csv_text.strip():
        return pd.DataFrame()
    try:
        return pd.read_csv(
            io.StringIO(csv_text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except pd.errors.ParserError as e:
        raise CampaignParseError(f"Malformed campaign CSV: {e}") from e


def aggregate_campaign_frame(df: pd.DataFrame, now: Optional[datetime] = None) -> CampaignDataset:
    """Sum the sheet rows into metrics, daily series and campaigns."""
    now = now or datetime.utcnow()
    if df.empty:
        return CampaignDataset(last_updated=now, source="csv")

    headers = list(df.columns)
    cols = {field: find_header(headers, needles) for field, needles in HEADER_NEEDLES.items()}

    def value(row: Mapping[str, Any], field: str) -> float:
        col = cols[field]
        return to_number(row[col]) if col is not None else 0.0

    totals = {"clicks": 0.0, "impressions": 0.0, "conversions": 0.0, "spend": 0.0, "revenue": 0.0}
    bounce_sum = 0.0
    bounce_count = 0
    daily: Dict[str, DailyData] = {}
    campaigns: Dict[str, CampaignData] = {}

    for row in df.to_dict(orient="records"):
        clicks = value(row, "clicks")
        impressions = value(row, "impressions")
        conversions = value(row, "conversions")
        spend = value(row, "spend")
        # Without a sessions column, clicks stand in for sessions
        sessions = value(row, "sessions") if cols["sessions"] is not None else clicks

        totals["clicks"] += clicks
        totals["impressions"] += impressions
        totals["conversions"] += conversions
        totals["spend"] += spend
        totals["revenue"] += value(row, "revenue")

        bounce = value(row, "bounce")
        if bounce > 0:
            bounce_sum += bounce
            bounce_count += 1

        day = to_text(row[cols["date"]]) if cols["date"] is not None else ""
        if day:
            entry = daily.setdefault(day, DailyData(date=day))
            entry.sessions += sessions
            entry.clicks += clicks
            entry.impressions += impressions
            entry.conversions += conversions

        name = to_text(row[cols["campaign"]]) if cols["campaign"] is not None else ""
        if name:
            entry = campaigns.setdefault(name, CampaignData(name=name))
            entry.clicks += clicks
            entry.impressions += impressions
            entry.conversions += conversions
            entry.spend += spend

    roas = safe_divide(totals["revenue"], totals["spend"])
    if not roas and cols["roas"] is not None:
        # No spend to compute from: report the sheet's own figure
        roas = to_number(df.iloc[0][cols["roas"]])

    metrics = CampaignMetrics(
        clicks=totals["clicks"],
        impressions=totals["impressions"],
        conversions=totals["conversions"],
        roas=roas,
        bounce_rate=bounce_sum / bounce_count if bounce_count else DEFAULT_BOUNCE_RATE,
        ctr=safe_divide(totals["clicks"], totals["impressions"]) * 100,
        spend=totals["spend"],
        revenue=totals["revenue"],
    )
    return CampaignDataset(
        metrics=metrics,
        daily_data=sorted(daily.values(), key=lambda d: d.date),
        campaigns=list(campaigns.values()),
        last_updated=now,
        source="csv",
    )


def parse_campaign_csv(csv_text: str, now: Optional[datetime] = None) -> CampaignDataset:
    df = read_campaign_csv(csv_text)
    dataset = aggregate_campaign_frame(df, now=now)
    log.debug(f"Parsed campaign CSV: {len(df)} rows, {len(dataset.campaigns)} campaigns")
    return dataset


def parse_campaign_json(payload: Any, now: Optional[datetime] = None) -> CampaignDataset:
    """
    Map the JSON API answer onto a CampaignDataset.

    The API reports pre-aggregated camelCase fields; missing ones are 0.
    """
    if not isinstance(payload, dict):
        raise CampaignParseError(f"Expected a JSON object, got {type(payload).__name__}")

    def number(key: str) -> float:
        return to_number(payload.get(key))

    try:
        daily: List[DailyData] = [DailyData.model_validate(d) for d in payload.get("dailyData") or []]
        campaigns: List[CampaignData] = [CampaignData.model_validate(c) for c in payload.get("campaigns") or []]
    except (ValidationError, TypeError) as e:
        raise CampaignParseError(f"Invalid campaign JSON: {e}") from e

    return CampaignDataset(
        metrics=CampaignMetrics(
            clicks=number("clicks"),
            impressions=number("impressions"),
            conversions=number("conversions"),
            roas=number("roas"),
            bounce_rate=number("bounceRate"),
            ctr=number("ctr"),
            spend=number("spend"),
            revenue=number("revenue"),
        ),
        daily_data=daily,
        campaigns=campaigns,
        last_updated=now or datetime.utcnow(),
        source="json",
    )


def campaign_rates(campaign: CampaignData) -> Dict[str, Any]:
    """One campaign's counts plus its CTR, conversion rate and cost per conversion."""
    return {
        **campaign.model_dump(),
        "ctr": round(safe_divide(campaign.clicks, campaign.impressions) * 100, 2),
        "conversion_rate": round(safe_divide(campaign.conversions, campaign.clicks) * 100, 2),
        "cost_per_conversion": round(safe_divide(campaign.spend, campaign.conversions), 2),
    }


def campaign_highlights(campaigns: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Best and worst campaign by CTR and by cost per conversion.

    Only campaigns with impressions are ranked by CTR and only campaigns
    with conversions by cost. The worst-cost campaign carries the saving of
    a BUDGET_CUT_RATIO budget cut, the best-cost one the extra conversions
    expected from a BUDGET_RAISE_RATIO raise.
    """
    by_ctr = sorted((c for c in campaigns if c["impressions"] > 0), key=lambda c: c["ctr"], reverse=True)
    by_cost = sorted((c for c in campaigns if c["conversions"] > 0), key=lambda c: c["cost_per_conversion"])

    highlights: Dict[str, Any] = {
        "best_ctr": None,
        "worst_ctr": None,
        "best_cost_per_conversion": None,
        "worst_cost_per_conversion": None,
    }
    if by_ctr:
        highlights["best_ctr"] = {"name": by_ctr[0]["name"], "ctr": by_ctr[0]["ctr"]}
        highlights["worst_ctr"] = {"name": by_ctr[-1]["name"], "ctr": by_ctr[-1]["ctr"]}
    if by_cost:
        best, worst = by_cost[0], by_cost[-1]
        highlights["best_cost_per_conversion"] = {
            "name": best["name"],
            "cost_per_conversion": best["cost_per_conversion"],
            "potential_extra_conversions": round(best["conversions"] * BUDGET_RAISE_RATIO),
        }
        highlights["worst_cost_per_conversion"] = {
            "name": worst["name"],
            "cost_per_conversion": worst["cost_per_conversion"],
            "potential_savings": round(worst["spend"] * BUDGET_CUT_RATIO, 2),
        }
    return highlights


def campaign_summary(dataset: CampaignDataset) -> Dict[str, Any]:
    """Derived KPIs shown next to the raw metrics."""
    m = dataset.metrics
    campaigns = [campaign_rates(c) for c in dataset.campaigns]
    return {
        "conversion_rate": round(safe_divide(m.conversions, m.clicks) * 100, 2),
        "cost_per_click": round(safe_divide(m.spend, m.clicks), 2),
        "cost_per_conversion": round(safe_divide(m.spend, m.conversions), 2),
        "campaign_count": len(dataset.campaigns),
        "days": len(dataset.daily_data),
        "campaigns": campaigns,
        "highlights": campaign_highlights(campaigns),
    }
