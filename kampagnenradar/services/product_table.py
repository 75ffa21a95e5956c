"""
Product table query and CSV export.

The table view filters by stock status, searches base id / name, sorts
and pages. The export writes the filtered, sorted set (unpaged) as a
semicolon-separated CSV with a UTF-8 BOM so Excel opens umlauts and
decimal commas correctly in German and Portuguese locales.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import pandas as pd

from kampagnenradar.models.product import (
    CanonicalProduct,
    HEALTHY,
    WARNING,
    CRITICAL,
    STOCK_STATUSES,
)

ALL_STATUSES = "all"
STATUS_FILTERS = (ALL_STATUSES,) + STOCK_STATUSES
SORT_FIELDS = ("base_id", "base_name", "units_sold", "revenue", "available", "stock_status")
SORT_DIRECTIONS = ("asc", "desc")

# Worst first when sorting ascending
_STATUS_ORDER = {CRITICAL: 0, WARNING: 1, HEALTHY: 2}

CSV_DELIMITER = ";"
CSV_ENCODING = "utf-8-sig"

EXPORT_HEADERS = {
    "de": ["Artikel-Basis", "Produkt", "Verkauft", "Umsatz", "Verfügbar", "Status"],
    "pt": ["Artigo Base", "Produto", "Vendido", "Receita", "Disponível", "Status"],
}
STATUS_LABELS = {
    "de": {HEALTHY: "Gut", WARNING: "Warnung", CRITICAL: "Kritisch"},
    "pt": {HEALTHY: "Bom", WARNING: "Alerta", CRITICAL: "Crítico"},
}
EXPORT_LANGUAGES = tuple(EXPORT_HEADERS)


@dataclass
class ProductQuery:
    status: str = ALL_STATUSES
    search: str = ""
    sort_by: str = "revenue"
    direction: str = "desc"
    page: int = 1
    page_size: int = 15

    def validate(self):
        """Raise ValueError for values the table does not support."""
        if self.status not in STATUS_FILTERS:
            raise ValueError(f"Invalid status filter '{self.status}'. Use one of: {', '.join(STATUS_FILTERS)}")
        if self.sort_by not in SORT_FIELDS:
            raise ValueError(f"Invalid sort field '{self.sort_by}'. Use one of: {', '.join(SORT_FIELDS)}")
        if self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Invalid sort direction '{self.direction}'. Use asc or desc")
        if self.page < 1 or self.page_size < 1:
            raise ValueError("page and page_size must be positive")


def _sort_key(field_name: str):
    if field_name == "stock_status":
        return lambda p: _STATUS_ORDER.get(p.stock_status, len(_STATUS_ORDER))
    if field_name in ("base_id", "base_name"):
        return lambda p: getattr(p, field_name).lower()
    return lambda p: getattr(p, field_name)


def filter_products(products: Sequence[CanonicalProduct], query: ProductQuery) -> List[CanonicalProduct]:
    """Status filter, case-insensitive search, then sort. No paging."""
    query.validate()
    result = list(products)
    if query.status != ALL_STATUSES:
        result = [p for p in result if p.stock_status == query.status]

    term = query.search.strip().lower()
    if term:
        result = [p for p in result if term in p.base_id.lower() or term in p.base_name.lower()]

    return sorted(result, key=_sort_key(query.sort_by), reverse=query.direction == "desc")


def query_products(products: Sequence[CanonicalProduct], query: ProductQuery) -> Dict[str, Any]:
    """One page of the product table plus paging info."""
    matched = filter_products(products, query)
    total = len(matched)
    total_pages = max(1, math.ceil(total / query.page_size))
    start = (query.page - 1) * query.page_size
    return {
        "items": [p.to_dict() for p in matched[start:start + query.page_size]],
        "total": total,
        "page": query.page,
        "page_size": query.page_size,
        "total_pages": total_pages,
    }


def _quantity(value: float):
    return int(value) if float(value).is_integer() else value


def products_to_frame(products: Sequence[CanonicalProduct], language: str = "de") -> pd.DataFrame:
    """Export columns with localized headers and status labels."""
    if language not in EXPORT_HEADERS:
        raise ValueError(f"Unsupported export language '{language}'. Use one of: {', '.join(EXPORT_LANGUAGES)}")
    labels = STATUS_LABELS[language]
    records = [
        [
            p.base_id,
            p.base_name,
            _quantity(p.units_sold),
            f"{p.revenue:.2f}",
            _quantity(p.available),
            labels.get(p.stock_status, p.stock_status),
        ]
        for p in products
    ]
    return pd.DataFrame(records, columns=EXPORT_HEADERS[language])


def export_products_csv(products: Sequence[CanonicalProduct], language: str = "de") -> bytes:
    """Semicolon-separated CSV bytes, UTF-8 with BOM."""
    df = products_to_frame(products, language)
    text = df.to_csv(sep=CSV_DELIMITER, index=False, lineterminator="\n")
    return text.encode(CSV_ENCODING)
