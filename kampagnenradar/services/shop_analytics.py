"""
Shop / sales-channel breakdown.

Works on raw rows, not on aggregated products: a base product sold in two
shops contributes to both.
"""
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from kampagnenradar.models.product import ShopSummary
from kampagnenradar.services.date_filter import DateRange
from kampagnenradar.services.product_aggregation import resolve_rows
from kampagnenradar.utils.helpers import safe_divide

UNKNOWN_SHOP = "Unknown"

# Shop status relative to the average shop revenue
SHOP_GOOD_FACTOR = 1.2
SHOP_WARNING_FACTOR = 0.5


def classify_shop(revenue: float, avg_revenue: float) -> str:
    if revenue >= avg_revenue * SHOP_GOOD_FACTOR:
        return "good"
    if revenue >= avg_revenue * SHOP_WARNING_FACTOR:
        return "warning"
    return "bad"


def aggregate_shops(
    rows: Sequence[Mapping[str, Any]],
    date_range: Optional[DateRange] = None,
    now: Optional[datetime] = None,
) -> List[ShopSummary]:
    """Revenue, units and distinct products per channel, biggest first."""
    shops: Dict[str, ShopSummary] = {}
    base_ids: Dict[str, Set[str]] = {}

    for row in resolve_rows(rows, date_range, now=now):
        shop_name = row.sales_channel or UNKNOWN_SHOP
        summary = shops.get(shop_name)
        if summary is None:
            summary = ShopSummary(shop_name=shop_name)
            shops[shop_name] = summary
            base_ids[shop_name] = set()
        summary.total_revenue += row.revenue
        summary.total_units_sold += row.units_sold
        if row.base_id:
            base_ids[shop_name].add(row.base_id)

    if not shops:
        return []

    total_revenue = sum(s.total_revenue for s in shops.values())
    avg_revenue = total_revenue / len(shops)
    for shop_name, summary in shops.items():
        summary.product_count = len(base_ids[shop_name])
        summary.percentage_of_total = safe_divide(summary.total_revenue, total_revenue) * 100
        summary.status = classify_shop(summary.total_revenue, avg_revenue)

    return sorted(shops.values(), key=lambda s: s.total_revenue, reverse=True)
