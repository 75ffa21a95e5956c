#!/usr/bin/env python3
"""
Product Export Script

Fetches the product sheet (or uses the local cache), aggregates variants
into base products and writes the product table as a semicolon-separated
CSV (UTF-8 with BOM), ready for Excel.

Usage:
    python scripts/export_products.py
    python scripts/export_products.py --from 2026-10-01 --to 2026-10-31 --language pt
    python scripts/export_products.py --status critical --refresh --output critical.csv
"""
import sys
import asyncio
import argparse
from pathlib import Path
from datetime import date

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kampagnenradar.services.data_fetch_service import build_product_service
from kampagnenradar.services.date_filter import DateRange
from kampagnenradar.services.product_analytics import parse_product_data
from kampagnenradar.services.product_table import (
    EXPORT_LANGUAGES,
    SORT_FIELDS,
    STATUS_FILTERS,
    ProductQuery,
    export_products_csv,
    filter_products,
)


def parse_args():
    parser = argparse.ArgumentParser(description="Export aggregated products to CSV")
    parser.add_argument("--from", dest="date_from", type=date.fromisoformat, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="date_to", type=date.fromisoformat, help="End date (YYYY-MM-DD)")
    parser.add_argument("--language", choices=EXPORT_LANGUAGES, default="de")
    parser.add_argument("--status", choices=STATUS_FILTERS, default="all")
    parser.add_argument("--search", default="")
    parser.add_argument("--sort", choices=SORT_FIELDS, default="revenue")
    parser.add_argument("--asc", action="store_true", help="Sort ascending")
    parser.add_argument("--refresh", action="store_true", help="Bypass the cache")
    parser.add_argument("--output", default=None, help="Output file (default: products_<today>.csv)")
    return parser.parse_args()


async def run_export(args) -> int:
    service = build_product_service()
    result = await service.load(force_refresh=args.refresh)

    if not result.has_data:
        print(f"ERROR: {result.error}")
        return 1
    if result.stale:
        print(f"WARNING: {result.error}. Using cached data.")

    date_range = DateRange(date_from=args.date_from, date_to=args.date_to)
    analytics = parse_product_data(result.data.rows, date_range, last_updated=result.data.fetched_at)

    query = ProductQuery(
        status=args.status,
        search=args.search,
        sort_by=args.sort,
        direction="asc" if args.asc else "desc",
    )
    products = filter_products(analytics.products, query)

    output = Path(args.output or f"products_{date.today().isoformat()}.csv")
    output.write_bytes(export_products_csv(products, args.language))

    m = analytics.metrics
    print(f"\n{'='*60}")
    print("PRODUCT EXPORT")
    print(f"{'='*60}")
    print(f"  Source rows:      {len(result.data.rows):,} ({result.data.source}, fetched {result.data.fetched_at:%Y-%m-%d %H:%M})")
    print(f"  Base products:    {m.total_products:,} ({m.total_variants:,} variants)")
    print(f"  Revenue:          {m.total_revenue:,.2f}")
    print(f"  Stock health:     {m.healthy_stock} healthy / {m.warning_stock} warning / {m.critical_stock} critical")
    print(f"  Exported:         {len(products):,} rows -> {output}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run_export(parse_args())))
