# carfeed/config.py
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional

class Settings(BaseSettings):
    FIRECRAWL_API_KEY: Optional[str] = None
    FIRECRAWL_API_URL: str = "https://api.firecrawl.dev/v1/scrape"
    FIRECRAWL_FORMAT: str = "extract"  # "extract" (v1) or "json"
    FIRECRAWL_WAIT_MS: int = 4000
    FIRECRAWL_IMAGE_WAIT_MS: int = 3000
    FIRECRAWL_TIMEOUT: float = 90.0

    DATABASE_URL: str = "sqlite+sqlite:///./carfeed.db"

    LOG_LEVEL: str = "INFO"

    WEB_HOST: str = "0.0.0.0"
    WEB_PORT: int = 8000

    SCRAPE_SITES: List[str] = Field(
        default_factory=lambda: ["carfind", "surf4cars", "autotrader", "webuycars", "carscoza"]
    )
    SCRAPE_DEFAULT_LIMIT: int = 25
    SCRAPE_MIN_LIMIT: int = 25
    SCRAPE_PER_SITE_OVERHEAD: int = 2
    SCRAPE_MAX_CONCURRENCY: int = 0  # 0 = one request per site, all at once

    INSERT_BATCH_SIZE: int = 20
    REFRESH_BATCH_SIZE: int = 50
    REFRESH_DEFAULT_LIMIT: int = 500
    REFRESH_MAX_CONCURRENCY: int = 5

    DEFAULT_COUNTRY: str = "South Africa"
    DEFAULT_LOCATION: str = "South Africa"
    DEFAULT_TRANSMISSION: str = "manual"
    DEFAULT_FUEL_TYPE: str = "petrol"
    DEFAULT_PRICE: Optional[float] = 0
    DEFAULT_MILEAGE: Optional[int] = 0
    MISSING_SOURCE_URL: str = "drop"  # "drop" or "search_url"

    # random values for missing price/mileage/year, and generated listings
    SYNTHETIC_FILL: bool = False
    SYNTHETIC_LISTINGS: bool = False

    FALLBACK_IMAGE_TEMPLATE: str = "https://source.unsplash.com/800x600/?{query}"
    BLOCKED_IMAGE_HOSTS: List[str] = Field(
        default_factory=lambda: [
            "source.unsplash.com",
            "images.unsplash.com",
            "via.placeholder.com",
            "placehold.co",
        ]
    )

    SCHEDULER_ENABLED: bool = True
    DAILY_SCRAPE_HOUR: int = 5
    DAILY_SCRAPE_MINUTE: int = 7
    DAILY_SCRAPE_LIMIT: int = 50
    IMAGE_REFRESH_HOUR: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
