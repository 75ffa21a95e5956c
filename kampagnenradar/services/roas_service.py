"""
ROAS Model

There is no ad-platform integration behind the product sheet, so ad spend
is estimated as a fixed share of revenue. With a fixed ratio the overall
ROAS is a constant (1 / 0.15 ~= 6.667) for any dataset with revenue; the
per-product splits, suggestions and alerts are what carry information.
"""
from typing import Dict, List, Optional, Sequence

from kampagnenradar.models.product import (
    CanonicalProduct,
    ProductTrend,
    ROASAlert,
    ROASSuggestion,
    ROASSummary,
    CRITICAL,
    HIGH,
    MEDIUM,
    LOW,
)
from kampagnenradar.services.recommendation_engine import averages
from kampagnenradar.utils.helpers import calculate_percentage_change, format_currency, safe_divide

# Estimated ad spend as a share of revenue
AD_SPEND_RATIO = 0.15

ROAS_THRESHOLDS = {
    "unprofitable_revenue_factor": 0.3,
    "roas_warning_below": 3.0,
    "roas_info_from": 4.0,
    "unprofitable_share_warning": 0.3,
    "bundle_units_factor": 0.2,
    "bundle_min_available": 10,
}

# Impact estimates, as share of product revenue
BUDGET_INCREASE_UPLIFT = 0.20
BUDGET_DECREASE_SAVINGS = 0.15
STOCKOUT_MONTHLY_LOSS = 0.50

PRODUCT_LIST_LIMIT = 10
INCREASE_BUDGET_LIMIT = 3
DECREASE_BUDGET_LIMIT = 3
RESTOCK_LIMIT = 3
BUNDLE_LIMIT = 2
IMPROVEMENTS_LIMIT = 5


def estimate_ad_spend(revenue: float) -> float:
    return revenue * AD_SPEND_RATIO


def compute_overall_roas(total_revenue: float) -> float:
    """Revenue / estimated spend, 0 when there is no spend."""
    return safe_divide(total_revenue, estimate_ad_spend(total_revenue))


def profitable_products(
    products: Sequence[CanonicalProduct], avg_revenue: float
) -> List[CanonicalProduct]:
    """Above-average revenue, best first (uncapped)."""
    above = [p for p in products if p.revenue > avg_revenue]
    return sorted(above, key=lambda p: p.revenue, reverse=True)


def unprofitable_products(
    products: Sequence[CanonicalProduct], avg_revenue: float
) -> List[CanonicalProduct]:
    """Some revenue, but under 30% of the average. Weakest first (uncapped)."""
    limit = avg_revenue * ROAS_THRESHOLDS["unprofitable_revenue_factor"]
    below = [p for p in products if 0 < p.revenue < limit]
    return sorted(below, key=lambda p: p.revenue)


def build_suggestions(
    products: Sequence[CanonicalProduct],
    profitable: Sequence[CanonicalProduct],
    unprofitable: Sequence[CanonicalProduct],
    avg_units: float,
) -> List[ROASSuggestion]:
    suggestions: List[ROASSuggestion] = []

    for p in profitable[:INCREASE_BUDGET_LIMIT]:
        uplift = p.revenue * BUDGET_INCREASE_UPLIFT
        suggestions.append(ROASSuggestion(
            type="increase_budget",
            priority=HIGH,
            base_id=p.base_id,
            product=p.base_name,
            message=f"Increase ad budget for {p.base_name}: revenue well above average",
            impact=f"+{format_currency(uplift)} estimated additional revenue",
            estimated_value=uplift,
        ))

    for p in unprofitable[:DECREASE_BUDGET_LIMIT]:
        savings = p.revenue * BUDGET_DECREASE_SAVINGS
        suggestions.append(ROASSuggestion(
            type="decrease_budget",
            priority=MEDIUM,
            base_id=p.base_id,
            product=p.base_name,
            message=f"Reduce ad budget for {p.base_name}: revenue far below average",
            impact=f"{format_currency(savings)} estimated ad spend savings",
            estimated_value=savings,
        ))

    restock = [p for p in products if p.stock_status == CRITICAL and p.units_sold > avg_units]
    for p in restock[:RESTOCK_LIMIT]:
        loss = p.revenue * STOCKOUT_MONTHLY_LOSS
        suggestions.append(ROASSuggestion(
            type="restock",
            priority=HIGH,
            base_id=p.base_id,
            product=p.base_name,
            message=f"Restock {p.base_name}: in demand but out of stock",
            impact=f"-{format_currency(loss)} estimated monthly revenue loss",
            estimated_value=loss,
        ))

    bundle = [
        p for p in products
        if p.units_sold < avg_units * ROAS_THRESHOLDS["bundle_units_factor"]
        and p.available > ROAS_THRESHOLDS["bundle_min_available"]
    ]
    for p in bundle[:BUNDLE_LIMIT]:
        suggestions.append(ROASSuggestion(
            type="bundle",
            priority=LOW,
            base_id=p.base_id,
            product=p.base_name,
            message=f"Bundle {p.base_name} with a best seller to move stock",
            impact=f"{p.available:.0f} units available",
            estimated_value=0.0,
        ))

    return suggestions


def build_alerts(
    products: Sequence[CanonicalProduct],
    overall_roas: float,
    unprofitable_count: int,
) -> List[ROASAlert]:
    alerts: List[ROASAlert] = []
    t = ROAS_THRESHOLDS

    if overall_roas < t["roas_warning_below"]:
        alerts.append(ROASAlert(
            type="warning",
            message=f"Overall ROAS {overall_roas:.2f} is below {t['roas_warning_below']:.0f}",
        ))
    elif overall_roas >= t["roas_info_from"]:
        alerts.append(ROASAlert(
            type="info",
            message=f"Overall ROAS {overall_roas:.2f} is healthy",
        ))

    critical = sum(1 for p in products if p.stock_status == CRITICAL)
    if critical:
        alerts.append(ROASAlert(
            type="critical",
            message=f"{critical} product(s) with critical stock",
        ))

    if products and unprofitable_count > len(products) * t["unprofitable_share_warning"]:
        alerts.append(ROASAlert(
            type="warning",
            message=f"{unprofitable_count} of {len(products)} products are unprofitable",
        ))

    return alerts


def compute_improvements(
    current: Sequence[CanonicalProduct],
    previous: Sequence[CanonicalProduct],
) -> List[ProductTrend]:
    """Revenue change per product present in both periods, largest moves first."""
    previous_by_id: Dict[str, CanonicalProduct] = {p.base_id: p for p in previous}
    trends: List[ProductTrend] = []
    for product in current:
        before = previous_by_id.get(product.base_id)
        if before is None or before.revenue <= 0:
            continue
        change = calculate_percentage_change(product.revenue, before.revenue)
        trends.append(ProductTrend(
            base_id=product.base_id,
            product=product.base_name,
            metric="revenue",
            previous_value=before.revenue,
            current_value=product.revenue,
            change_percent=change,
        ))
    trends.sort(key=lambda t: abs(t.change_percent), reverse=True)
    return trends[:IMPROVEMENTS_LIMIT]


def compute_roas(
    products: Sequence[CanonicalProduct],
    previous_products: Optional[Sequence[CanonicalProduct]] = None,
) -> ROASSummary:
    """Build the ROAS summary for an aggregated product set."""
    total_revenue = sum(p.revenue for p in products)
    total_ad_spend = estimate_ad_spend(total_revenue)
    overall_roas = safe_divide(total_revenue, total_ad_spend)
    avg_revenue, avg_units = averages(products)

    profitable = profitable_products(products, avg_revenue)
    unprofitable = unprofitable_products(products, avg_revenue)

    return ROASSummary(
        total_ad_spend=total_ad_spend,
        total_revenue=total_revenue,
        overall_roas=overall_roas,
        profitable_products=profitable[:PRODUCT_LIST_LIMIT],
        unprofitable_products=unprofitable[:PRODUCT_LIST_LIMIT],
        suggestions=build_suggestions(products, profitable, unprofitable, avg_units),
        alerts=build_alerts(products, overall_roas, len(unprofitable)),
        improvements=compute_improvements(products, previous_products or []),
    )
