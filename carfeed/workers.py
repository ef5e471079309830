# carfeed/workers.py
import asyncio
import logging
import math
from typing import List, Optional, Sequence

from carfeed.config import settings
from carfeed.schemas import RawListing
from carfeed.scrapers.base import BaseExtractor
from carfeed.scrapers.sites import SiteConfig

logger = logging.getLogger(__name__)


def per_site_limit(total_target: int, site_count: int, overhead: int = 0) -> int:
    if site_count <= 0:
        return 0
    return math.ceil(total_target / site_count) + overhead


async def scrape_all(
    sites: Sequence[SiteConfig],
    extractor: BaseExtractor,
    total_target: int,
    *,
    overhead: int = 0,
    max_concurrency: int = 0,
) -> List[RawListing]:
    """Extract from every site at once and flatten the results.

    A site that fails contributes nothing; the others are still used.
    """
    limit = per_site_limit(total_target, len(sites), overhead)
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

    async def one(site: SiteConfig) -> List[RawListing]:
        if semaphore is None:
            return await extractor.extract_listings(site, limit)
        async with semaphore:
            return await extractor.extract_listings(site, limit)

    results = await asyncio.gather(*(one(s) for s in sites), return_exceptions=True)

    all_raw: List[RawListing] = []
    for site, result in zip(sites, results):
        if isinstance(result, BaseException):
            logger.error("[scrape:%s] error: %s", site.key, result)
            continue
        all_raw.extend(result)
    logger.info("Total listings scraped: %d from %d sites", len(all_raw), len(sites))
    return all_raw


async def run_scrape_cycle(limit: Optional[int] = None):
    """Scheduled daily import, same pipeline as the HTTP trigger."""
    from carfeed.scrapers.firecrawl import FirecrawlExtractor
    from carfeed.scrapers.sites import DAILY_SITE_KEYS, select_sites
    from carfeed.services.ingest import run_ingestion
    from carfeed.services.store import EventStore

    if not settings.FIRECRAWL_API_KEY:
        logger.error("Skipping scheduled scrape: FIRECRAWL_API_KEY not configured")
        return None
    result = await run_ingestion(
        limit or settings.DAILY_SCRAPE_LIMIT,
        extractor=FirecrawlExtractor.from_settings(settings.FIRECRAWL_API_KEY),
        store=EventStore(),
        sites=select_sites(DAILY_SITE_KEYS),
        fallback=True,
        overhead=0,
    )
    logger.info("Scheduled scrape finished: %s", result.message)
    return result


async def run_image_refresh_cycle(limit: Optional[int] = None):
    from carfeed.services.images import refresh_images
    from carfeed.services.store import EventStore

    result = await refresh_images(limit or settings.REFRESH_DEFAULT_LIMIT, store=EventStore(), fallback=True)
    logger.info("Scheduled image refresh finished: %s", result.message)
    return result
