# carfeed/scrapers/base.py
import httpx
from typing import List, Optional
from carfeed.schemas import RawListing
from carfeed.scrapers.sites import SiteConfig

class BaseExtractor:
    source = "base"

    def __init__(self, timeout: float = 90.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    def headers(self) -> dict:
        return {"User-Agent": "Mozilla/5.0 (compatible; carfeed/0.1)", "Content-Type": "application/json"}

    async def post_json(self, url: str, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport, headers=self.headers()) as client:
            return await client.post(url, json=payload)

    async def extract_listings(self, site: SiteConfig, limit: int) -> List[RawListing]:
        raise NotImplementedError

    async def extract_image(self, source_url: str) -> Optional[str]:
        raise NotImplementedError
