"""
Product Aggregation

Rolls raw sheet rows up into base products:
  1. resolve each raw row onto canonical fields (column_resolver)
  2. optional date filter
  3. drop rows without a base id or base name
  4. group by base id, summing volume / revenue / stock, counting variants
  5. drop pure-noise products (no revenue, no units, no stock)

Variant stockouts can disappear inside an aggregate (one variant at 0,
another at 3 -> product is 'warning'). That is the intended product view;
`variant_details()` exposes the per-variant numbers when they are needed.
"""
from datetime import datetime
from typing import Dict, List, Mapping, Any, Optional, Sequence

from kampagnenradar.models.product import (
    CanonicalProduct,
    ProductMetrics,
    ResolvedRow,
    HEALTHY,
    WARNING,
    CRITICAL,
)
from kampagnenradar.services.column_resolver import resolve_row
from kampagnenradar.services.date_filter import DateRange, filter_by_date

# Stock status thresholds (available units)
HEALTHY_STOCK_ABOVE = 10
WARNING_STOCK_FROM = 1

TOP_PRODUCTS_LIMIT = 5
SLOW_PRODUCTS_LIMIT = 5


def classify_stock_status(available: float) -> str:
    """available > 10 -> healthy, 1..10 -> warning, < 1 -> critical."""
    if available > HEALTHY_STOCK_ABOVE:
        return HEALTHY
    if available >= WARNING_STOCK_FROM:
        return WARNING
    return CRITICAL


def resolve_rows(
    rows: Sequence[Mapping[str, Any]],
    date_range: Optional[DateRange] = None,
    now: Optional[datetime] = None,
) -> List[ResolvedRow]:
    """Resolve raw rows and apply the optional date filter."""
    resolved = [resolve_row(row) for row in rows]
    return filter_by_date(resolved, date_range, lambda r: r.date, now=now)


def aggregate_resolved(resolved: Sequence[ResolvedRow]) -> List[CanonicalProduct]:
    """Group already-resolved rows by base id. Output keeps first-seen order."""
    products: Dict[str, CanonicalProduct] = {}

    for row in resolved:
        if not row.base_id or not row.base_name:
            continue

        product = products.get(row.base_id)
        if product is None:
            product = CanonicalProduct(base_id=row.base_id, base_name=row.base_name)
            products[row.base_id] = product

        product.units_sold += row.units_sold
        product.revenue += row.revenue
        product.stock_on_hand += row.stock_on_hand
        product.in_orders += row.in_orders
        product.available += row.available
        product.variant_count += 1
        if row.sales_channel:
            product.sales_channel = row.sales_channel

    result = []
    for product in products.values():
        if product.revenue == 0 and product.units_sold == 0 and product.stock_on_hand == 0:
            continue
        product.stock_status = classify_stock_status(product.available)
        result.append(product)
    return result


def aggregate_products(
    rows: Sequence[Mapping[str, Any]],
    date_range: Optional[DateRange] = None,
    now: Optional[datetime] = None,
) -> List[CanonicalProduct]:
    """Raw sheet rows -> base products."""
    return aggregate_resolved(resolve_rows(rows, date_range, now=now))


def variant_details(
    rows: Sequence[Mapping[str, Any]],
    base_id: str,
    date_range: Optional[DateRange] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Per-variant stock detail for one base product (not aggregated)."""
    details = []
    for row in resolve_rows(rows, date_range, now=now):
        if row.base_id != base_id or not row.base_name:
            continue
        details.append({
            "sku": row.sku,
            "name": row.name,
            "units_sold": row.units_sold,
            "revenue": round(row.revenue, 2),
            "stock_on_hand": row.stock_on_hand,
            "in_orders": row.in_orders,
            "available": row.available,
            "stock_status": classify_stock_status(row.available),
            "sales_channel": row.sales_channel,
            "date": row.date.isoformat() if row.date else None,
        })
    return details


def compute_metrics(products: Sequence[CanonicalProduct]) -> ProductMetrics:
    """Dashboard KPIs over the aggregated product set."""
    total_revenue = sum(p.revenue for p in products)
    total_units = sum(p.units_sold for p in products)
    return ProductMetrics(
        total_products=len(products),
        total_variants=sum(p.variant_count for p in products),
        total_revenue=total_revenue,
        total_units_sold=total_units,
        avg_price=total_revenue / total_units if total_units else 0.0,
        healthy_stock=sum(1 for p in products if p.stock_status == HEALTHY),
        warning_stock=sum(1 for p in products if p.stock_status == WARNING),
        critical_stock=sum(1 for p in products if p.stock_status == CRITICAL),
    )


def top_and_slow_products(products: Sequence[CanonicalProduct]):
    """Best and worst sellers by units sold."""
    by_units = sorted(products, key=lambda p: p.units_sold, reverse=True)
    top = by_units[:TOP_PRODUCTS_LIMIT]
    slow = list(reversed(by_units[-SLOW_PRODUCTS_LIMIT:])) if by_units else []
    return top, slow


def critical_stock_products(products: Sequence[CanonicalProduct]) -> List[CanonicalProduct]:
    """Critical-stock products, best sellers first (they hurt the most)."""
    critical = [p for p in products if p.stock_status == CRITICAL]
    return sorted(critical, key=lambda p: p.units_sold, reverse=True)
