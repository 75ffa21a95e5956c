"""Data Connectors for Kampagnenradar"""

from kampagnenradar.connectors.base_connector import BaseConnector, ConnectorError
from kampagnenradar.connectors.product_sheet import ProductSheetConnector
from kampagnenradar.connectors.campaign_sheet import CampaignSheetConnector

__all__ = [
    "BaseConnector",
    "ConnectorError",
    "ProductSheetConnector",
    "CampaignSheetConnector",
]
