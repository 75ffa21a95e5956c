"""
Kampagnenradar Analytics
Main FastAPI application
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager

from kampagnenradar.config import get_settings
from kampagnenradar.utils.logger import log
from kampagnenradar import __version__

# Import routers
from kampagnenradar.api import health, products, campaigns

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    log.info(f"Starting {settings.app_name} v{__version__}")
    log.info(f"Environment: {settings.environment}")

    if not settings.product_api_url:
        log.warning("PRODUCT_API_URL not configured, product endpoints will serve cached data only")
    if not settings.campaign_csv_url and not settings.campaign_json_url:
        log.warning("No campaign sheet URLs configured, campaign endpoints will serve cached data only")
    log.info(f"Cache directory: {settings.cache_dir} (TTL {settings.cache_ttl_seconds}s)")

    yield

    # Shutdown
    log.info("Shutting down application")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="""
    Product and campaign analytics for spreadsheet-backed shops

    - Rolls variant rows up into base products with stock health
    - SEO opportunities and ad waste from simple threshold rules
    - Estimated ROAS with budget suggestions and alerts
    - Revenue share per sales channel
    - Campaign KPIs, daily series and per-campaign totals

    Data comes from Google Sheets endpoints and is cached locally for a
    short freshness window. When a source is down the last cached copy is
    served with a warning.
    """,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=500)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(products.router)
app.include_router(campaigns.router)


@app.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt():
    """Block all crawlers"""
    return "User-agent: *\nDisallow: /\n"


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "app": settings.app_name,
        "version": __version__,
        "description": "Product and campaign analytics",
        "docs": "/docs",
        "health": "/health",
        "status": "/status",
        "endpoints": {
            "product_dashboard": "GET /products/dashboard",
            "product_table": "GET /products",
            "product_recommendations": "GET /products/recommendations",
            "product_roas": "GET /products/roas",
            "product_shops": "GET /products/shops",
            "product_variants": "GET /products/{base_id}/variants",
            "product_export": "GET /products/export.csv",
            "product_refresh": "POST /products/refresh",
            "campaign_dashboard": "GET /campaigns/dashboard",
            "campaign_refresh": "POST /campaigns/refresh"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "kampagnenradar.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        workers=settings.api_workers if not settings.debug else 1
    )
