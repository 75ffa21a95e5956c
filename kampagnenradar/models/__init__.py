"""Data models for the Kampagnenradar analytics service"""

from kampagnenradar.models.product import (
    CanonicalProduct,
    ResolvedRow,
    Recommendation,
    ProductMetrics,
    ShopSummary,
    ROASSuggestion,
    ROASAlert,
    ROASSummary,
    ProductTrend,
    ProductAnalytics,
)

from kampagnenradar.models.datasets import (
    RawProductDataset,
    CampaignMetrics,
    DailyData,
    CampaignData,
    CampaignDataset,
)

__all__ = [
    "CanonicalProduct",
    "ResolvedRow",
    "Recommendation",
    "ProductMetrics",
    "ShopSummary",
    "ROASSuggestion",
    "ROASAlert",
    "ROASSummary",
    "ProductTrend",
    "ProductAnalytics",
    "RawProductDataset",
    "CampaignMetrics",
    "DailyData",
    "CampaignData",
    "CampaignDataset",
]
