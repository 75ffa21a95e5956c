"""
SEO / Ads Recommendation Engine

Deterministic threshold heuristics over the aggregated product set. Every
product is checked against every rule independently, so one product can
produce several recommendations.

Rules (relative to the set's average revenue / units):
  ads_invest   revenue > 1.5x avg and healthy stock        -> high
  opportunity  revenue < 0.3x avg and > 10 available       -> medium
  optimize     units < 0.2x avg and > 5 available          -> low
  waste        critical stock and units above average      -> high
  ads_reduce   revenue < 0.1x avg and units < 0.1x avg     -> medium
"""
from typing import Dict, List, Sequence, Tuple

from kampagnenradar.models.product import (
    CanonicalProduct,
    Recommendation,
    HEALTHY,
    CRITICAL,
    OPPORTUNITY,
    WASTE,
    OPTIMIZE,
    ADS_INVEST,
    ADS_REDUCE,
    HIGH,
    MEDIUM,
    LOW,
)
from kampagnenradar.utils.helpers import format_currency

RECOMMENDATION_THRESHOLDS = {
    "ads_invest_revenue_factor": 1.5,
    "seo_opportunity_revenue_factor": 0.3,
    "seo_opportunity_min_available": 10,
    "bundle_units_factor": 0.2,
    "bundle_min_available": 5,
    "ads_reduce_revenue_factor": 0.1,
    "ads_reduce_units_factor": 0.1,
}

OPPORTUNITY_KINDS = (OPPORTUNITY, OPTIMIZE, ADS_INVEST)
WASTE_KINDS = (WASTE, ADS_REDUCE)

_PRIORITY_RANK = {HIGH: 0, MEDIUM: 1, LOW: 2}


def averages(products: Sequence[CanonicalProduct]) -> Tuple[float, float]:
    """Mean revenue and mean units sold (0, 0 for an empty set)."""
    if not products:
        return 0.0, 0.0
    n = len(products)
    return (
        sum(p.revenue for p in products) / n,
        sum(p.units_sold for p in products) / n,
    )


def evaluate_product(
    product: CanonicalProduct,
    avg_revenue: float,
    avg_units: float,
) -> List[Recommendation]:
    """Apply all five rules to one product, in rule order."""
    t = RECOMMENDATION_THRESHOLDS
    recs: List[Recommendation] = []

    def add(kind: str, priority: str, message: str, details: str):
        recs.append(Recommendation(
            base_id=product.base_id,
            base_name=product.base_name,
            kind=kind,
            priority=priority,
            message=message,
            details=details,
        ))

    if product.revenue > avg_revenue * t["ads_invest_revenue_factor"] and product.stock_status == HEALTHY:
        add(
            ADS_INVEST, HIGH,
            "Top seller with healthy stock: increase ad investment",
            f"Revenue {format_currency(product.revenue)} vs. average {format_currency(avg_revenue)}, "
            f"{product.available:.0f} units available",
        )

    if (product.revenue < avg_revenue * t["seo_opportunity_revenue_factor"]
            and product.available > t["seo_opportunity_min_available"]):
        add(
            OPPORTUNITY, MEDIUM,
            "Low revenue despite available stock: optimise SEO (title, description, keywords)",
            f"Revenue {format_currency(product.revenue)}, {product.available:.0f} units available",
        )

    if (product.units_sold < avg_units * t["bundle_units_factor"]
            and product.available > t["bundle_min_available"]):
        add(
            OPTIMIZE, LOW,
            "Slow mover: consider bundling with a best seller",
            f"{product.units_sold:.0f} units sold vs. average {avg_units:.1f}, "
            f"{product.available:.0f} units available",
        )

    if product.stock_status == CRITICAL and product.units_sold > avg_units:
        add(
            WASTE, HIGH,
            "Out of stock with above-average demand: restock to stop losing sales",
            f"{product.units_sold:.0f} units sold, {product.available:.0f} available",
        )

    if (product.revenue < avg_revenue * t["ads_reduce_revenue_factor"]
            and product.units_sold < avg_units * t["ads_reduce_units_factor"]):
        add(
            ADS_REDUCE, MEDIUM,
            "Very low revenue and sales: reduce or pause ad spend",
            f"Revenue {format_currency(product.revenue)}, {product.units_sold:.0f} units sold",
        )

    return recs


def generate_recommendations(products: Sequence[CanonicalProduct]) -> List[Recommendation]:
    """All recommendations for the set, product order then rule order."""
    avg_revenue, avg_units = averages(products)
    recs: List[Recommendation] = []
    for product in products:
        recs.extend(evaluate_product(product, avg_revenue, avg_units))
    return recs


def split_recommendations(
    recommendations: Sequence[Recommendation],
) -> Dict[str, List[Recommendation]]:
    """Split into {'opportunities': [...], 'waste': [...]} by kind."""
    return {
        "opportunities": [r for r in recommendations if r.kind in OPPORTUNITY_KINDS],
        "waste": [r for r in recommendations if r.kind in WASTE_KINDS],
    }


def sort_by_priority(recommendations: Sequence[Recommendation]) -> List[Recommendation]:
    """Stable sort high -> medium -> low."""
    return sorted(recommendations, key=lambda r: _PRIORITY_RANK.get(r.priority, len(_PRIORITY_RANK)))
