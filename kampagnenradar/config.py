"""
Configuration management for the Kampagnenradar analytics service
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Kampagnenradar Analytics"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 1

    # Product data (Apps Script endpoint returning {success, rows})
    product_api_url: str = ""
    product_sheet_name: Optional[str] = None  # ?sheet=<name>, retried without it on failure
    product_fallback_url: Optional[str] = None  # Secondary endpoint; defaults to product_api_url without sheet

    # Campaign data (Google Sheets CSV export, JSON API as fallback)
    campaign_csv_url: str = ""
    campaign_json_url: str = ""

    # Local cache
    cache_dir: str = "./cache"
    cache_ttl_seconds: int = 300  # Freshness window (5 minutes)
    product_cache_key: str = "kampagnenradar_product_data"
    campaign_cache_key: str = "kampagnenradar_data"

    # HTTP
    fetch_timeout_seconds: float = 300.0  # aiohttp default total timeout

    # Product table
    products_page_size: int = 15

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
