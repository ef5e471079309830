# carfeed/services/ingest.py
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from carfeed.config import settings
from carfeed.normalizer import build_event_record
from carfeed.schemas import RawListing
from carfeed.scrapers.base import BaseExtractor
from carfeed.scrapers.sites import SiteConfig, select_sites
from carfeed.services.dedupe import dedupe
from carfeed.services.persist import persist_in_batches
from carfeed.services.store import EventStore
from carfeed.services.synthetic import generate_fallback_listings
from carfeed.workers import scrape_all

logger = logging.getLogger(__name__)

@dataclass
class IngestResult:
    inserted: int
    message: str
    skipped: Optional[int] = None
    truncated: Optional[int] = None
    total_scraped: Optional[int] = None
    sites: Optional[int] = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


async def import_listings(
    listings: List[RawListing],
    store: EventStore,
    total_limit: int,
    *,
    batch_size: int = settings.INSERT_BATCH_SIZE,
    site_count: int = 1,
    source_label: Optional[str] = None,
    now: Optional[datetime] = None,
    country: str = settings.DEFAULT_COUNTRY,
) -> IngestResult:
    """Dedupe, persist and summarise an already-extracted set of listings.

    ``skipped`` counts duplicates; new listings over ``total_limit`` are
    reported as ``truncated``.
    """
    source_label = source_label or f"{site_count} sites"
    if not listings:
        return IngestResult(inserted=0, message="No listings found to import")

    unique = await dedupe(listings, store.existing_source_urls)
    skipped = len(listings) - len(unique)
    new_listings = unique[:total_limit]
    truncated = len(unique) - len(new_listings)
    if truncated:
        logger.info("Dropping %d new listings over the target of %d", truncated, total_limit)
    if not new_listings:
        return IngestResult(inserted=0, skipped=skipped, message="All listings already exist")

    now = now or datetime.now(timezone.utc)
    rows = [build_event_record(l, now, country) for l in new_listings]
    inserted = await persist_in_batches(rows, batch_size, store.insert_many)
    if inserted < len(rows):
        logger.warning("Inserted %d of %d new listings; see batch errors above", inserted, len(rows))
    else:
        logger.info("Successfully inserted %d new listings", inserted)

    return IngestResult(
        inserted=inserted,
        skipped=skipped,
        truncated=truncated or None,
        total_scraped=len(listings),
        sites=site_count,
        message=f"Imported {inserted} new used car listings from {source_label}.",
    )


async def run_ingestion(
    limit: Optional[int],
    *,
    extractor: BaseExtractor,
    store: EventStore,
    sites: Optional[Sequence[SiteConfig]] = None,
    fallback: bool = False,
    overhead: int = settings.SCRAPE_PER_SITE_OVERHEAD,
    min_limit: int = settings.SCRAPE_MIN_LIMIT,
    batch_size: int = settings.INSERT_BATCH_SIZE,
    max_concurrency: int = settings.SCRAPE_MAX_CONCURRENCY,
    synthetic_listings: bool = settings.SYNTHETIC_LISTINGS,
    default_limit: int = settings.SCRAPE_DEFAULT_LIMIT,
    country: str = settings.DEFAULT_COUNTRY,
    now: Optional[datetime] = None,
) -> IngestResult:
    """Scrape every configured site and import what is new.

    ``fallback`` tops a short scrape up with generated listings, but only in
    deployments that enable ``synthetic_listings``.
    """
    sites = tuple(sites) if sites is not None else select_sites(settings.SCRAPE_SITES)
    total_limit = max(min_limit, limit or default_limit)
    logger.info("Starting scrape: %d total listings across %d sites", total_limit, len(sites))

    all_listings = await scrape_all(
        sites, extractor, total_limit, overhead=overhead, max_concurrency=max_concurrency
    )

    if fallback:
        if not synthetic_listings:
            logger.warning("Fallback listings requested but SYNTHETIC_LISTINGS is disabled; ignoring")
        elif len(all_listings) < total_limit:
            shortfall = total_limit - len(all_listings)
            logger.info("Generating %d fallback listings to reach target of %d", shortfall, total_limit)
            all_listings.extend(generate_fallback_listings(shortfall, sites))

    return await import_listings(
        all_listings,
        store,
        total_limit,
        batch_size=batch_size,
        site_count=len(sites),
        now=now,
        country=country,
    )
