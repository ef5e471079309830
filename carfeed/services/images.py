# carfeed/services/images.py
import asyncio
import logging
from dataclasses import dataclass
from typing import AbstractSet, List, Optional

from carfeed.config import settings
from carfeed.scrapers.base import BaseExtractor
from carfeed.services.persist import persist_in_batches
from carfeed.services.store import EventStore
from carfeed.utils.images import BLOCKED_IMAGE_HOSTS, FALLBACK_IMAGE_TEMPLATE, resolve_image_url

logger = logging.getLogger(__name__)

@dataclass
class RefreshResult:
    updated: int
    message: str

    def to_dict(self) -> dict:
        return {"updated": self.updated, "message": self.message}


async def _rederive(
    row: dict,
    extractor: Optional[BaseExtractor],
    fallback: bool,
    blocked_hosts: AbstractSet[str],
    template: str,
) -> Optional[str]:
    if fallback:
        # no network: keep a real stored photo, otherwise rebuild from the title
        return resolve_image_url(
            row.get("background_image_url"),
            row.get("source_url") or "",
            row.get("title"),
            blocked_hosts=blocked_hosts,
            template=template,
        )
    if not row.get("source_url"):
        return None
    return await extractor.extract_image(row["source_url"])


async def refresh_images(
    limit: int,
    *,
    store: EventStore,
    extractor: Optional[BaseExtractor] = None,
    fallback: bool = False,
    batch_size: int = settings.REFRESH_BATCH_SIZE,
    max_concurrency: int = settings.REFRESH_MAX_CONCURRENCY,
    blocked_hosts: AbstractSet[str] = BLOCKED_IMAGE_HOSTS,
    template: str = FALLBACK_IMAGE_TEMPLATE,
) -> RefreshResult:
    """Re-derive image URLs of scraped rows and write back the ones that changed.

    Without ``fallback`` every row's listing page is re-extracted and only a
    verified real image is accepted; with ``fallback`` the URL is rebuilt
    locally from the stored image and title.
    """
    if not fallback and extractor is None:
        raise ValueError("an extractor is required unless fallback is set")

    rows = await store.fetch_scraped(limit)
    if not rows:
        return RefreshResult(updated=0, message="No listings found to update")

    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def one(row: dict) -> Optional[str]:
        async with semaphore:
            return await _rederive(row, extractor, fallback, blocked_hosts, template)

    derived = await asyncio.gather(*(one(r) for r in rows))

    updates: List[dict] = []
    for row, image_url in zip(rows, derived):
        if not image_url or image_url == row.get("background_image_url"):
            continue
        updates.append({"id": row["id"], "background_image_url": image_url})
    logger.info("Image refresh: %d of %d rows changed", len(updates), len(rows))

    updated = await persist_in_batches(updates, batch_size, store.update_images)
    kind = "fallback" if fallback else "verified listing"
    return RefreshResult(updated=updated, message=f"Updated {updated} listings with {kind} images.")
