"""
Shared test setup.

Settings are read once at import time, so the environment is pinned here
before any kampagnenradar module is imported.
"""
import os
import tempfile

os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("CACHE_DIR", tempfile.mkdtemp(prefix="kampagnenradar-test-cache-"))
os.environ.setdefault("PRODUCT_API_URL", "")
os.environ.setdefault("CAMPAIGN_CSV_URL", "")
os.environ.setdefault("CAMPAIGN_JSON_URL", "")

import pytest  # noqa: E402


@pytest.fixture
def widget_rows():
    """Two widget variants and one gadget, as the sheet endpoint returns them."""
    return [
        {"sku": "A-1", "name": "Widget-Red", "units": 5, "revenue": 50, "stock": 3},
        {"sku": "A-2", "name": "Widget-Blue", "units": 2, "revenue": 20, "stock": 0},
        {"sku": "B-1", "name": "Gadget", "units": 100, "revenue": 1000, "stock": 50},
    ]


@pytest.fixture
def german_rows():
    """Realistic German export with shop and date columns."""
    return [
        {
            "Artikelnummer": "TS-100-S", "Produktname": "Shirt Basic | S",
            "Verkauft": "12", "Umsatz": "239,88 €", "Bestand": "20", "In Auftrag": "2",
            "Verfügbar": "18", "Shop": "Amazon", "Datum": "03.10.2026",
        },
        {
            "Artikelnummer": "TS-100-M", "Produktname": "Shirt Basic | M",
            "Verkauft": "8", "Umsatz": "159,92 €", "Bestand": "0", "In Auftrag": "0",
            "Verfügbar": "0", "Shop": "Shopify", "Datum": "05.10.2026",
        },
        {
            "Artikelnummer": "HO-200-L", "Produktname": "Hoodie Premium - L",
            "Verkauft": "1", "Umsatz": "59,90 €", "Bestand": "30", "In Auftrag": "0",
            "Verfügbar": "30", "Shop": "Amazon", "Datum": "20.09.2026",
        },
        {
            "Artikelnummer": "CA-300", "Produktname": "Cap",
            "Verkauft": "0", "Umsatz": "0", "Bestand": "0", "In Auftrag": "0",
            "Verfügbar": "0", "Shop": "", "Datum": "",
        },
    ]
