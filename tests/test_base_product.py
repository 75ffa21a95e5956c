"""
Base SKU / base name extraction.
"""
import pytest

from kampagnenradar.services.base_product import extract_base_id, extract_base_name


@pytest.mark.parametrize("sku, expected", [
    ("AB-100-red", "AB-100"),
    ("AB", "AB"),
    ("-AB", "-AB"),
    ("A-1", "A"),
    ("A-2", "A"),
    ("  XY-7-blau-L ", "XY-7-blau"),
    ("", ""),
])
def test_extract_base_id(sku, expected):
    assert extract_base_id(sku) == expected


@pytest.mark.parametrize("name, expected", [
    ("Shoe - Red | L", "Shoe"),
    ("Widget-Red", "Widget"),
    ("Widget-Blue", "Widget"),
    ("Hoodie | Navy - XL", "Hoodie"),
    ("Gadget", "Gadget"),
    ("-Promo", "-Promo"),
    ("|Promo", "|Promo"),
    ("  Cap  ", "Cap"),
    ("", ""),
])
def test_extract_base_name(name, expected):
    assert extract_base_name(name) == expected


def test_variants_share_base_id():
    assert extract_base_id("A-1") == extract_base_id("A-2")
