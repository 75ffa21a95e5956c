"""
Product Analytics

Single entry point that turns raw product rows into the full dashboard
result. Everything is recomputed from the rows on every call.
"""
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from kampagnenradar.models.product import ProductAnalytics
from kampagnenradar.services.date_filter import DateRange
from kampagnenradar.services.product_aggregation import (
    aggregate_products,
    compute_metrics,
    critical_stock_products,
    top_and_slow_products,
)
from kampagnenradar.services.recommendation_engine import (
    generate_recommendations,
    split_recommendations,
)
from kampagnenradar.services.roas_service import compute_roas
from kampagnenradar.services.shop_analytics import aggregate_shops
from kampagnenradar.utils.logger import log


def parse_product_data(
    rows: Sequence[Mapping[str, Any]],
    date_range: Optional[DateRange] = None,
    now: Optional[datetime] = None,
    last_updated: Optional[datetime] = None,
) -> ProductAnalytics:
    """
    Build ProductAnalytics from raw sheet rows.

    When the date range is bounded, the same rows are also aggregated over
    the preceding period of equal length to derive revenue trends.
    """
    now = now or datetime.now()
    products = aggregate_products(rows, date_range, now=now)

    previous_products = None
    if date_range is not None and not date_range.is_empty:
        previous_range = date_range.previous_period(now)
        if previous_range is not None:
            previous_products = aggregate_products(rows, previous_range, now=now)

    recommendations = split_recommendations(generate_recommendations(products))
    top, slow = top_and_slow_products(products)

    analytics = ProductAnalytics(
        products=products,
        metrics=compute_metrics(products),
        top_products=top,
        slow_products=slow,
        critical_alerts=critical_stock_products(products),
        seo_opportunities=recommendations["opportunities"],
        seo_waste=recommendations["waste"],
        roas=compute_roas(products, previous_products),
        shops=aggregate_shops(rows, date_range, now=now),
        last_updated=last_updated or now,
    )
    log.debug(
        f"Parsed {len(rows)} rows into {len(products)} products "
        f"({len(analytics.seo_opportunities)} opportunities, {len(analytics.seo_waste)} waste)"
    )
    return analytics
