"""
Campaign sheet connector.

Primary: the Google Sheets CSV export of the campaign tab.
Fallback: an Apps Script JSON API serving pre-aggregated metrics.
"""
from typing import Optional

from kampagnenradar.config import get_settings
from kampagnenradar.connectors.base_connector import BaseConnector, ConnectorError
from kampagnenradar.models.datasets import CampaignDataset
from kampagnenradar.services.campaign_analytics import (
    CampaignParseError,
    parse_campaign_csv,
    parse_campaign_json,
)
from kampagnenradar.utils.logger import log


class CampaignSheetConnector(BaseConnector):
    """Connector for the ad campaign sheet."""

    def __init__(
        self,
        csv_url: Optional[str] = None,
        json_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__("CampaignSheet", timeout_seconds)
        settings = get_settings()
        self.csv_url = csv_url if csv_url is not None else settings.campaign_csv_url
        self.json_url = json_url if json_url is not None else settings.campaign_json_url

    async def fetch_primary(self) -> CampaignDataset:
        csv_text = await self._get(self.csv_url, as_json=False)
        try:
            dataset = parse_campaign_csv(csv_text)
        except CampaignParseError as e:
            self.error_count += 1
            raise ConnectorError(str(e)) from e
        self._mark_synced()
        log.info(f"Fetched campaign CSV: {len(dataset.campaigns)} campaigns, {len(dataset.daily_data)} days")
        return dataset

    async def fetch_fallback(self) -> CampaignDataset:
        payload = await self._get(self.json_url)
        try:
            dataset = parse_campaign_json(payload)
        except CampaignParseError as e:
            self.error_count += 1
            raise ConnectorError(str(e)) from e
        self._mark_synced()
        log.info(f"Fetched campaign JSON: {len(dataset.campaigns)} campaigns")
        return dataset
