"""
Product analytics records.

Everything here is derived from raw sheet rows on every parse; nothing is
persisted on its own.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

# Stock status
HEALTHY = "healthy"
WARNING = "warning"
CRITICAL = "critical"
STOCK_STATUSES = (HEALTHY, WARNING, CRITICAL)

# Recommendation kinds
OPPORTUNITY = "opportunity"
WASTE = "waste"
OPTIMIZE = "optimize"
ADS_INVEST = "ads_invest"
ADS_REDUCE = "ads_reduce"

# Priorities
HIGH = "high"
MEDIUM = "medium"
LOW = "low"


@dataclass
class ResolvedRow:
    """One raw sheet row mapped onto canonical fields."""
    base_id: str
    base_name: str
    sku: str = ""
    name: str = ""
    units_sold: float = 0.0
    revenue: float = 0.0
    stock_on_hand: float = 0.0
    in_orders: float = 0.0
    available: float = 0.0
    sales_channel: str = ""
    date: Optional[datetime] = None


@dataclass
class CanonicalProduct:
    """A base product with all of its variant rows rolled up."""
    base_id: str
    base_name: str
    units_sold: float = 0.0
    revenue: float = 0.0
    stock_on_hand: float = 0.0
    in_orders: float = 0.0
    available: float = 0.0
    variant_count: int = 0
    sales_channel: str = ""
    stock_status: str = CRITICAL

    @property
    def avg_price(self) -> float:
        return self.revenue / self.units_sold if self.units_sold else 0.0

    def to_dict(self) -> dict:
        return {
            "base_id": self.base_id,
            "base_name": self.base_name,
            "units_sold": self.units_sold,
            "revenue": round(self.revenue, 2),
            "stock_on_hand": self.stock_on_hand,
            "in_orders": self.in_orders,
            "available": self.available,
            "variant_count": self.variant_count,
            "avg_price": round(self.avg_price, 2),
            "stock_status": self.stock_status,
            "sales_channel": self.sales_channel,
        }


@dataclass
class Recommendation:
    """A single SEO/ads heuristic finding for one product."""
    base_id: str
    base_name: str
    kind: str
    priority: str
    message: str
    details: str = ""

    def to_dict(self) -> dict:
        return {
            "base_id": self.base_id,
            "base_name": self.base_name,
            "kind": self.kind,
            "priority": self.priority,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class ProductMetrics:
    """KPI block for the product dashboard."""
    total_products: int = 0
    total_variants: int = 0
    total_revenue: float = 0.0
    total_units_sold: float = 0.0
    avg_price: float = 0.0
    healthy_stock: int = 0
    warning_stock: int = 0
    critical_stock: int = 0

    def to_dict(self) -> dict:
        return {
            "total_products": self.total_products,
            "total_variants": self.total_variants,
            "total_revenue": round(self.total_revenue, 2),
            "total_units_sold": self.total_units_sold,
            "avg_price": round(self.avg_price, 2),
            "healthy_stock": self.healthy_stock,
            "warning_stock": self.warning_stock,
            "critical_stock": self.critical_stock,
        }


@dataclass
class ShopSummary:
    """Sales channel totals computed from raw (non-deduplicated) rows."""
    shop_name: str
    total_revenue: float = 0.0
    total_units_sold: float = 0.0
    product_count: int = 0
    percentage_of_total: float = 0.0
    status: str = "warning"  # good / warning / bad vs. average shop revenue

    def to_dict(self) -> dict:
        return {
            "shop_name": self.shop_name,
            "total_revenue": round(self.total_revenue, 2),
            "total_units_sold": self.total_units_sold,
            "product_count": self.product_count,
            "percentage_of_total": round(self.percentage_of_total, 2),
            "status": self.status,
        }


@dataclass
class ROASSuggestion:
    type: str  # increase_budget, decrease_budget, restock, bundle
    priority: str
    base_id: str
    product: str
    message: str
    impact: str
    estimated_value: float = 0.0

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "priority": self.priority,
            "base_id": self.base_id,
            "product": self.product,
            "message": self.message,
            "impact": self.impact,
            "estimated_value": round(self.estimated_value, 2),
        }


@dataclass
class ROASAlert:
    type: str  # critical, warning, info
    message: str

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message}


@dataclass
class ProductTrend:
    """Revenue change of one product against the preceding period."""
    base_id: str
    product: str
    metric: str
    previous_value: float
    current_value: float
    change_percent: float

    @property
    def is_positive(self) -> bool:
        return self.change_percent >= 0

    def to_dict(self) -> dict:
        return {
            "base_id": self.base_id,
            "product": self.product,
            "metric": self.metric,
            "previous_value": round(self.previous_value, 2),
            "current_value": round(self.current_value, 2),
            "change_percent": round(self.change_percent, 1),
            "is_positive": self.is_positive,
        }


@dataclass
class ROASSummary:
    total_ad_spend: float = 0.0
    total_revenue: float = 0.0
    overall_roas: float = 0.0
    profitable_products: List[CanonicalProduct] = field(default_factory=list)
    unprofitable_products: List[CanonicalProduct] = field(default_factory=list)
    suggestions: List[ROASSuggestion] = field(default_factory=list)
    alerts: List[ROASAlert] = field(default_factory=list)
    improvements: List[ProductTrend] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_ad_spend": round(self.total_ad_spend, 2),
            "total_revenue": round(self.total_revenue, 2),
            "overall_roas": round(self.overall_roas, 3),
            "profitable_products": [p.to_dict() for p in self.profitable_products],
            "unprofitable_products": [p.to_dict() for p in self.unprofitable_products],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "alerts": [a.to_dict() for a in self.alerts],
            "improvements": [i.to_dict() for i in self.improvements],
        }


@dataclass
class ProductAnalytics:
    """Full parse result for one (optionally date-filtered) product dataset."""
    products: List[CanonicalProduct] = field(default_factory=list)
    metrics: ProductMetrics = field(default_factory=ProductMetrics)
    top_products: List[CanonicalProduct] = field(default_factory=list)
    slow_products: List[CanonicalProduct] = field(default_factory=list)
    critical_alerts: List[CanonicalProduct] = field(default_factory=list)
    seo_opportunities: List[Recommendation] = field(default_factory=list)
    seo_waste: List[Recommendation] = field(default_factory=list)
    roas: ROASSummary = field(default_factory=ROASSummary)
    shops: List[ShopSummary] = field(default_factory=list)
    last_updated: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "products": [p.to_dict() for p in self.products],
            "metrics": self.metrics.to_dict(),
            "top_products": [p.to_dict() for p in self.top_products],
            "slow_products": [p.to_dict() for p in self.slow_products],
            "critical_alerts": [p.to_dict() for p in self.critical_alerts],
            "seo_opportunities": [r.to_dict() for r in self.seo_opportunities],
            "seo_waste": [r.to_dict() for r in self.seo_waste],
            "roas": self.roas.to_dict(),
            "shops": [s.to_dict() for s in self.shops],
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }
