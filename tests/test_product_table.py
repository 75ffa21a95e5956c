"""
Product table filtering/sorting/paging and the CSV export.
"""
import pytest

from kampagnenradar.models.product import CanonicalProduct
from kampagnenradar.services.product_aggregation import classify_stock_status
from kampagnenradar.services.product_table import (
    ProductQuery,
    export_products_csv,
    filter_products,
    query_products,
)


def _product(base_id, name, revenue, units, available):
    return CanonicalProduct(
        base_id=base_id,
        base_name=name,
        units_sold=units,
        revenue=revenue,
        available=available,
        stock_on_hand=available,
        variant_count=1,
        stock_status=classify_stock_status(available),
    )


@pytest.fixture
def products():
    return [
        _product("TS-100", "Shirt Basic", 399.8, 20, 18),
        _product("HO-200", "Hoodie Premium", 59.9, 1, 30),
        _product("SO-300", "Socken", 12.5, 5, 0),
        _product("MU-400", "Mütze", 80.0, 4, 6),
    ]


class TestQuery:

    def test_default_sorts_by_revenue_desc(self, products):
        ids = [p.base_id for p in filter_products(products, ProductQuery())]
        assert ids == ["TS-100", "MU-400", "HO-200", "SO-300"]

    def test_status_filter(self, products):
        ids = [p.base_id for p in filter_products(products, ProductQuery(status="healthy"))]
        assert ids == ["TS-100", "HO-200"]

    def test_search_matches_id_and_name(self, products):
        assert [p.base_id for p in filter_products(products, ProductQuery(search="hoodie"))] == ["HO-200"]
        assert [p.base_id for p in filter_products(products, ProductQuery(search="so-3"))] == ["SO-300"]

    def test_sort_by_status_worst_first(self, products):
        query = ProductQuery(sort_by="stock_status", direction="asc")
        statuses = [p.stock_status for p in filter_products(products, query)]
        assert statuses == ["critical", "warning", "healthy", "healthy"]

    def test_sort_by_name(self, products):
        query = ProductQuery(sort_by="base_name", direction="asc")
        names = [p.base_name for p in filter_products(products, query)]
        assert names == ["Hoodie Premium", "Mütze", "Shirt Basic", "Socken"]

    def test_paging(self, products):
        page = query_products(products, ProductQuery(page=2, page_size=3))
        assert page["total"] == 4
        assert page["total_pages"] == 2
        assert [item["base_id"] for item in page["items"]] == ["SO-300"]

    def test_page_past_the_end(self, products):
        page = query_products(products, ProductQuery(page=5, page_size=15))
        assert page["items"] == []
        assert page["total_pages"] == 1

    @pytest.mark.parametrize("kwargs", [
        {"status": "sold_out"},
        {"sort_by": "price"},
        {"direction": "sideways"},
        {"page": 0},
    ])
    def test_invalid_query(self, products, kwargs):
        with pytest.raises(ValueError):
            filter_products(products, ProductQuery(**kwargs))


class TestExport:

    def test_german_export(self, products):
        content = export_products_csv(products[:2], "de")
        assert content.startswith(b"\xef\xbb\xbf")
        lines = content.decode("utf-8-sig").splitlines()
        assert lines[0] == "Artikel-Basis;Produkt;Verkauft;Umsatz;Verfügbar;Status"
        assert lines[1] == "TS-100;Shirt Basic;20;399.80;18;Gut"
        assert lines[2] == "HO-200;Hoodie Premium;1;59.90;30;Gut"

    def test_portuguese_labels(self, products):
        lines = export_products_csv(products[2:], "pt").decode("utf-8-sig").splitlines()
        assert lines[0] == "Artigo Base;Produto;Vendido;Receita;Disponível;Status"
        assert lines[1].endswith(";Crítico")
        assert lines[2].endswith(";Alerta")

    def test_empty_export_has_header(self):
        lines = export_products_csv([], "de").decode("utf-8-sig").splitlines()
        assert len(lines) == 1

    def test_unknown_language(self, products):
        with pytest.raises(ValueError):
            export_products_csv(products, "fr")
