"""
Full dashboard parse over raw rows.
"""
from datetime import date, datetime

import pytest

from kampagnenradar.services.date_filter import DateRange
from kampagnenradar.services.product_analytics import parse_product_data

NOW = datetime(2026, 10, 18, 12, 0)


def test_widget_dashboard(widget_rows):
    analytics = parse_product_data(widget_rows, now=NOW)

    assert [p.base_id for p in analytics.products] == ["A", "B"]
    assert analytics.metrics.total_revenue == 1070
    assert analytics.critical_alerts == []
    assert "B" in [r.base_id for r in analytics.seo_opportunities if r.kind == "ads_invest"]
    assert analytics.roas.total_ad_spend == pytest.approx(160.5)
    assert analytics.roas.overall_roas == pytest.approx(6.667, abs=0.001)
    assert [s.shop_name for s in analytics.shops] == ["Unknown"]
    assert analytics.last_updated == NOW


def test_last_updated_from_fetch_time(widget_rows):
    fetched = datetime(2026, 10, 18, 9, 0)
    assert parse_product_data(widget_rows, last_updated=fetched).last_updated == fetched


def test_empty_rows():
    analytics = parse_product_data([], now=NOW)
    assert analytics.products == []
    assert analytics.metrics.total_products == 0
    assert analytics.roas.overall_roas == 0
    assert analytics.shops == []


def test_trends_against_previous_period():
    rows = [
        {"sku": "A-1", "name": "Widget", "units": 10, "revenue": 150, "stock": 20, "date": "2026-10-10"},
        {"sku": "A-1", "name": "Widget", "units": 10, "revenue": 100, "stock": 20, "date": "2026-10-03"},
        {"sku": "B-1", "name": "Gadget", "units": 1, "revenue": 40, "stock": 20, "date": "2026-10-09"},
    ]
    week = DateRange(date_from=date(2026, 10, 8), date_to=date(2026, 10, 14))
    analytics = parse_product_data(rows, week, now=NOW)

    assert [p.base_id for p in analytics.products] == ["A", "B"]
    trends = analytics.roas.improvements
    assert len(trends) == 1
    assert trends[0].base_id == "A"
    assert trends[0].previous_value == 100
    assert trends[0].change_percent == pytest.approx(50)


def test_to_dict_is_json_ready(widget_rows):
    data = parse_product_data(widget_rows, now=NOW).to_dict()
    assert data["last_updated"] == NOW.isoformat()
    assert data["metrics"]["total_variants"] == 3
    assert data["products"][0]["stock_status"] == "warning"
