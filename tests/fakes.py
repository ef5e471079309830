# tests/fakes.py
from typing import Dict, List, Optional

from carfeed.schemas import RawListing
from carfeed.scrapers.base import BaseExtractor


def make_listing(source_url: str, title: str = "2019 Toyota Corolla 1.8 XS", site_name: str = "CarFind", **kw) -> RawListing:
    fields = dict(
        title=title,
        price=189900.0,
        year=2019,
        mileage=85000,
        transmission="manual",
        fuel_type="petrol",
        location="Cape Town",
        image_url="https://cdn.carfind.co.za/photos/1.jpg",
        source_url=source_url,
        site_name=site_name,
    )
    fields.update(kw)
    return RawListing(**fields)


class FakeExtractor(BaseExtractor):
    def __init__(
        self,
        by_site: Optional[Dict[str, List[RawListing]]] = None,
        images: Optional[Dict[str, Optional[str]]] = None,
        failing: tuple = (),
    ):
        super().__init__()
        self.by_site = by_site or {}
        self.images = images or {}
        self.failing = set(failing)
        self.calls: List[tuple] = []
        self.image_calls: List[str] = []

    async def extract_listings(self, site, limit):
        self.calls.append((site.key, limit))
        if site.key in self.failing:
            raise RuntimeError(f"{site.key} is down")
        return list(self.by_site.get(site.key, []))[:limit]

    async def extract_image(self, source_url):
        self.image_calls.append(source_url)
        return self.images.get(source_url)
