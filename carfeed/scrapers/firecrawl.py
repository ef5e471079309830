# carfeed/scrapers/firecrawl.py
from __future__ import annotations
import logging
from datetime import date
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from carfeed.config import Settings, settings
from carfeed.normalizer import DefaultPolicy, fill_defaults
from carfeed.schemas import ExtractedItem, RawListing
from carfeed.scrapers.base import BaseExtractor
from carfeed.scrapers.sites import SiteConfig
from carfeed.utils.images import absolute_url, is_real_image_url

logger = logging.getLogger(__name__)

LISTING_FIELDS = {
    "title": {"type": "string"},
    "price": {"type": "number"},
    "year": {"type": "number"},
    "mileage": {"type": "number"},
    "transmission": {"type": "string"},
    "fuel_type": {"type": "string"},
    "location": {"type": "string"},
    "image_url": {"type": "string"},
    "source_url": {"type": "string"},
}

LISTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "listings": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": LISTING_FIELDS,
                "required": ["title", "source_url"],
            },
        },
    },
}

IMAGE_SCHEMA = {"type": "object", "properties": {"image_url": {"type": "string"}}}

IMAGE_PROMPT = (
    "Extract the main vehicle listing image URL from this page. "
    "Return only a direct image URL if present."
)


def listings_prompt(limit: int) -> str:
    return (
        f"Extract up to {limit} used or preowned car listings from this page. For each listing extract: "
        "title (full car name with year, make, model), price (as a number in Rands without currency symbols), "
        "year (4 digit year), mileage (in kilometers as a number without 'km'), "
        "transmission (manual, automatic, cvt or semi-automatic), "
        "fuel_type (petrol, diesel, hybrid, electric or lpg), location (city or area), "
        "image_url (main car image URL), and source_url (direct link to the listing)."
    )


def _extracted(payload: Any) -> dict:
    """The structured result, whichever response shape the API used."""
    if not isinstance(payload, dict):
        return {}
    data = payload.get("data") or {}
    for candidate in (data.get("extract"), data.get("json"), payload.get("json")):
        if isinstance(candidate, dict):
            return candidate
    return {}


def _first_string(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return next((v for v in value if isinstance(v, str)), None)
    return None


class FirecrawlExtractor(BaseExtractor):
    source = "firecrawl"

    def __init__(
        self,
        api_key: str,
        *,
        policy: Optional[DefaultPolicy] = None,
        api_url: str = settings.FIRECRAWL_API_URL,
        fmt: str = settings.FIRECRAWL_FORMAT,
        wait_ms: int = settings.FIRECRAWL_WAIT_MS,
        image_wait_ms: int = settings.FIRECRAWL_IMAGE_WAIT_MS,
        timeout: float = settings.FIRECRAWL_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key
        self.policy = policy or DefaultPolicy.from_settings()
        self.api_url = api_url
        self.fmt = fmt
        self.wait_ms = wait_ms
        self.image_wait_ms = image_wait_ms

    @classmethod
    def from_settings(cls, api_key: str, s: Settings = settings, **kw) -> "FirecrawlExtractor":
        return cls(
            api_key,
            policy=DefaultPolicy.from_settings(s),
            api_url=s.FIRECRAWL_API_URL,
            fmt=s.FIRECRAWL_FORMAT,
            wait_ms=s.FIRECRAWL_WAIT_MS,
            image_wait_ms=s.FIRECRAWL_IMAGE_WAIT_MS,
            timeout=s.FIRECRAWL_TIMEOUT,
            **kw,
        )

    def headers(self) -> dict:
        return {**super().headers(), "Authorization": f"Bearer {self.api_key}"}

    def build_request(self, url: str, prompt: str, schema: dict, wait_ms: int) -> dict:
        if self.fmt == "json":
            formats: list = [{"type": "json", "prompt": prompt, "schema": schema}]
            body = {"url": url, "formats": formats}
        else:
            body = {"url": url, "formats": ["extract"], "extract": {"prompt": prompt, "schema": schema}}
        body["waitFor"] = wait_ms
        body["onlyMainContent"] = True
        return body

    async def _scrape(self, url: str, prompt: str, schema: dict, wait_ms: int, label: str) -> Optional[dict]:
        """POST one scrape request; None on any failure (already logged)."""
        try:
            r = await self.post_json(self.api_url, self.build_request(url, prompt, schema, wait_ms))
        except httpx.HTTPError as e:
            logger.error("Firecrawl request failed for %s: %s", label, e)
            return None
        try:
            payload = r.json()
        except ValueError:
            payload = None
        if not r.is_success or not isinstance(payload, dict) or not payload.get("success"):
            logger.error("Firecrawl error for %s (HTTP %s): %s", label, r.status_code, payload or r.text[:500])
            return None
        return payload

    async def extract_listings(self, site: SiteConfig, limit: int) -> List[RawListing]:
        logger.info("Scraping %d listings from %s...", limit, site.name)
        payload = await self._scrape(site.search_url, listings_prompt(limit), LISTINGS_SCHEMA, self.wait_ms, site.name)
        if payload is None:
            return []

        entries = _extracted(payload).get("listings") or []
        if not isinstance(entries, list):
            logger.warning("Unexpected listings payload from %s: %r", site.name, entries)
            return []
        logger.info("Extracted %d listings from %s", len(entries), site.name)

        today = date.today()
        items: List[RawListing] = []
        for entry in entries[:limit]:
            if not isinstance(entry, dict):
                logger.warning("Skipping non-object listing from %s: %r", site.name, entry)
                continue
            try:
                item = ExtractedItem.model_validate(entry)
            except ValidationError as e:
                logger.warning("Skipping malformed listing from %s: %s", site.name, e)
                continue
            listing = fill_defaults(item, site, self.policy, today=today)
            if listing is None:
                logger.debug("Dropping listing without source_url from %s: %s", site.name, item.title)
                continue
            items.append(listing)
        return items

    async def extract_image(self, source_url: str) -> Optional[str]:
        payload = await self._scrape(source_url, IMAGE_PROMPT, IMAGE_SCHEMA, self.image_wait_ms, source_url)
        if payload is None:
            return None
        extracted = _first_string(_extracted(payload).get("image_url"))
        resolved = absolute_url(extracted, source_url)
        return resolved if is_real_image_url(resolved, self.policy.blocked_image_hosts) else None
