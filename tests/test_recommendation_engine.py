"""
SEO / ads recommendation rules.
"""
from kampagnenradar.models.product import CanonicalProduct
from kampagnenradar.services.product_aggregation import classify_stock_status
from kampagnenradar.services.recommendation_engine import (
    averages,
    generate_recommendations,
    sort_by_priority,
    split_recommendations,
)


def _product(base_id, revenue, units, available):
    return CanonicalProduct(
        base_id=base_id,
        base_name=f"Product {base_id}",
        units_sold=units,
        revenue=revenue,
        stock_on_hand=max(available, 0),
        available=available,
        variant_count=1,
        stock_status=classify_stock_status(available),
    )


def _catalogue():
    # avg revenue 436.67, avg units 83.67
    return [
        _product("HI", revenue=1000, units=100, available=50),
        _product("LO", revenue=10, units=1, available=20),
        _product("OOS", revenue=300, units=150, available=0),
    ]


def test_rule_table():
    recs = generate_recommendations(_catalogue())
    assert [(r.base_id, r.kind, r.priority) for r in recs] == [
        ("HI", "ads_invest", "high"),
        ("LO", "opportunity", "medium"),
        ("LO", "optimize", "low"),
        ("LO", "ads_reduce", "medium"),
        ("OOS", "waste", "high"),
    ]


def test_split_into_opportunities_and_waste():
    split = split_recommendations(generate_recommendations(_catalogue()))
    assert [r.kind for r in split["opportunities"]] == ["ads_invest", "opportunity", "optimize"]
    assert [r.kind for r in split["waste"]] == ["ads_reduce", "waste"]


def test_double_average_healthy_product_gets_ads_invest():
    products = [
        _product("STAR", revenue=200, units=20, available=40),
        _product("DUD", revenue=0, units=0, available=0),
    ]
    recs = [r for r in generate_recommendations(products) if r.kind == "ads_invest"]
    assert len(recs) == 1
    assert recs[0].base_id == "STAR"
    assert recs[0].priority == "high"


def test_ads_invest_needs_healthy_stock():
    products = [
        _product("STAR", revenue=200, units=20, available=5),
        _product("DUD", revenue=0, units=0, available=0),
    ]
    assert not [r for r in generate_recommendations(products) if r.kind == "ads_invest"]


def test_deterministic():
    products = _catalogue()
    assert generate_recommendations(products) == generate_recommendations(products)


def test_empty_set():
    assert averages([]) == (0.0, 0.0)
    assert generate_recommendations([]) == []
    assert split_recommendations([]) == {"opportunities": [], "waste": []}


def test_all_zero_products_do_not_divide_by_zero():
    products = [_product("Z1", 0, 0, 0), _product("Z2", 0, 0, 0)]
    # 0 < 0 is false for every threshold rule; waste needs units above average
    assert generate_recommendations(products) == []


def test_sort_by_priority_is_stable():
    recs = sort_by_priority(generate_recommendations(_catalogue()))
    assert [r.priority for r in recs] == ["high", "high", "medium", "medium", "low"]
    assert [r.base_id for r in recs[:2]] == ["HI", "OOS"]
