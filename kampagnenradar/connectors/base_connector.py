"""
Base connector class for spreadsheet-backed data sources
"""
import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

import aiohttp

from kampagnenradar.config import get_settings
from kampagnenradar.utils.logger import log


class ConnectorError(Exception):
    """Network failure or an unusable response from a data source."""


class BaseConnector(ABC):
    """
    Base class for all data source connectors.

    A connector has exactly two ways to get its dataset: the primary
    endpoint and one fallback. Both raise ConnectorError on any failure;
    choosing between them (and caching) is the fetch service's job.
    """

    def __init__(self, name: str, timeout_seconds: Optional[float] = None):
        self.name = name
        if timeout_seconds is None:
            timeout_seconds = get_settings().fetch_timeout_seconds
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.last_sync = None
        self.sync_count = 0
        self.error_count = 0

    @abstractmethod
    async def fetch_primary(self) -> Any:
        """Fetch the dataset from the primary endpoint"""
        pass

    @abstractmethod
    async def fetch_fallback(self) -> Any:
        """Fetch the dataset from the fallback endpoint"""
        pass

    async def _get(self, url: str, params: Optional[Dict[str, str]] = None, as_json: bool = True) -> Any:
        """GET a URL and return the decoded JSON (or text) body."""
        if not url:
            raise ConnectorError(f"{self.name}: no URL configured")
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, params=params) as response:
                    if response.status != 200:
                        raise ConnectorError(f"{self.name}: {url} returned status {response.status}")
                    if as_json:
                        # Apps Script endpoints often answer with text/plain
                        return await response.json(content_type=None)
                    return await response.text()
        except ConnectorError:
            self.error_count += 1
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.error_count += 1
            log.warning(f"{self.name} request to {url} failed: {type(e).__name__}: {e}")
            raise ConnectorError(f"{self.name}: request failed: {e}") from e

    def _mark_synced(self):
        self.last_sync = datetime.utcnow()
        self.sync_count += 1

    def get_status(self) -> Dict[str, Any]:
        """Get connector status"""
        return {
            "name": self.name,
            "last_sync": self.last_sync,
            "sync_count": self.sync_count,
            "error_count": self.error_count,
            "error_rate": self.error_count / max(self.sync_count, 1),
        }
