"""
Connector payload validation and failure mapping (no network).
"""
import asyncio

import pytest

from kampagnenradar.connectors import CampaignSheetConnector, ConnectorError, ProductSheetConnector
from kampagnenradar.connectors.product_sheet import validate_rows_payload


def _run(coro):
    """Run an async coroutine in a sync test."""
    return asyncio.run(coro)


class TestRowsPayload:

    def test_valid_payload(self):
        rows = validate_rows_payload({"success": True, "rows": [{"sku": "A-1"}, "junk", {"sku": "B-1"}]})
        assert rows == [{"sku": "A-1"}, {"sku": "B-1"}]

    def test_empty_rows_are_valid(self):
        assert validate_rows_payload({"success": True, "rows": []}) == []

    @pytest.mark.parametrize("payload", [
        None,
        [],
        "ok",
        {"rows": []},
        {"success": False, "rows": [], "error": "Sheet not found"},
        {"success": True},
        {"success": True, "rows": {"sku": "A-1"}},
    ])
    def test_invalid_payloads(self, payload):
        with pytest.raises(ConnectorError):
            validate_rows_payload(payload)


class TestUnconfigured:

    def test_product_connector_without_url(self):
        connector = ProductSheetConnector(api_url="", sheet_name="", fallback_url="")
        with pytest.raises(ConnectorError):
            _run(connector.fetch_primary())
        with pytest.raises(ConnectorError):
            _run(connector.fetch_fallback())

    def test_campaign_connector_without_url(self):
        connector = CampaignSheetConnector(csv_url="", json_url="")
        with pytest.raises(ConnectorError):
            _run(connector.fetch_primary())
        with pytest.raises(ConnectorError):
            _run(connector.fetch_fallback())

    def test_status(self):
        connector = ProductSheetConnector(api_url="", sheet_name="", fallback_url="")
        status = connector.get_status()
        assert status["name"] == "ProductSheet"
        assert status["sync_count"] == 0
