"""
Product sheet connector.

The product sheet is published through an Apps Script web endpoint that
answers ``{"success": true, "rows": [{...}, ...]}``. Each row is a plain
column-label -> value mapping; labels vary per sheet and language and are
resolved later by the column resolver.

Primary request: ``<url>?sheet=<name>`` when a sheet name is configured.
Fallback: the configured fallback URL, or the same URL without the sheet
parameter (the script then serves its default tab).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from kampagnenradar.config import get_settings
from kampagnenradar.connectors.base_connector import BaseConnector, ConnectorError
from kampagnenradar.models.datasets import RawProductDataset
from kampagnenradar.utils.logger import log


def validate_rows_payload(payload: Any) -> List[Dict[str, Any]]:
    """Return the row list of a valid payload, raise ConnectorError otherwise."""
    if not isinstance(payload, dict):
        raise ConnectorError(f"Expected a JSON object, got {type(payload).__name__}")
    if not payload.get("success"):
        raise ConnectorError(f"Endpoint reported failure: {payload.get('error', 'no details')}")
    rows = payload.get("rows")
    if not isinstance(rows, list):
        raise ConnectorError("Response has no 'rows' list")
    return [row for row in rows if isinstance(row, dict)]


class ProductSheetConnector(BaseConnector):
    """Connector for the product sales/stock sheet."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        sheet_name: Optional[str] = None,
        fallback_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__("ProductSheet", timeout_seconds)
        settings = get_settings()
        self.api_url = api_url if api_url is not None else settings.product_api_url
        self.sheet_name = sheet_name if sheet_name is not None else settings.product_sheet_name
        self.fallback_url = fallback_url if fallback_url is not None else settings.product_fallback_url

    async def fetch_primary(self) -> RawProductDataset:
        params = {"sheet": self.sheet_name} if self.sheet_name else None
        return await self._fetch_rows(self.api_url, params, source="primary")

    async def fetch_fallback(self) -> RawProductDataset:
        return await self._fetch_rows(self.fallback_url or self.api_url, None, source="fallback")

    async def _fetch_rows(self, url: str, params: Optional[Dict[str, str]], source: str) -> RawProductDataset:
        payload = await self._get(url, params=params)
        try:
            rows = validate_rows_payload(payload)
        except ConnectorError:
            self.error_count += 1
            raise
        self._mark_synced()
        log.info(f"Fetched {len(rows)} product rows from {self.name} ({source})")
        return RawProductDataset(rows=rows, fetched_at=datetime.utcnow(), source=source)
