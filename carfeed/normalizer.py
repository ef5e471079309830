# carfeed/normalizer.py
import random
from dataclasses import dataclass
from datetime import date, datetime
from typing import AbstractSet, Optional

from carfeed.config import Settings, settings
from carfeed.schemas import ExtractedItem, RawListing
from carfeed.scrapers.sites import SiteConfig
from carfeed.utils.brands import classify
from carfeed.utils.images import (
    BLOCKED_IMAGE_HOSTS,
    FALLBACK_IMAGE_TEMPLATE,
    absolute_url,
    image_hosts,
    resolve_image_url,
)
from carfeed.utils.titles import parse_year

UNKNOWN_TITLE = "Unknown Vehicle"


@dataclass(frozen=True)
class DefaultPolicy:
    """How missing fields of an extracted listing are filled.

    ``synthetic_fill`` replaces missing price/mileage/year with random values,
    which some deployments used to make demo data look populated. It is off
    unless configured.
    """

    default_price: Optional[float] = 0
    default_mileage: Optional[int] = 0
    default_transmission: str = "manual"
    default_fuel_type: str = "petrol"
    default_location: str = "South Africa"
    missing_source_url: str = "drop"
    synthetic_fill: bool = False
    blocked_image_hosts: AbstractSet[str] = BLOCKED_IMAGE_HOSTS
    fallback_image_template: str = FALLBACK_IMAGE_TEMPLATE

    @classmethod
    def from_settings(cls, s: Settings = settings) -> "DefaultPolicy":
        return cls(
            default_price=s.DEFAULT_PRICE,
            default_mileage=s.DEFAULT_MILEAGE,
            default_transmission=s.DEFAULT_TRANSMISSION,
            default_fuel_type=s.DEFAULT_FUEL_TYPE,
            default_location=s.DEFAULT_LOCATION,
            missing_source_url=s.MISSING_SOURCE_URL,
            synthetic_fill=s.SYNTHETIC_FILL,
            blocked_image_hosts=image_hosts(s.BLOCKED_IMAGE_HOSTS),
            fallback_image_template=s.FALLBACK_IMAGE_TEMPLATE,
        )


def fill_defaults(
    item: ExtractedItem,
    site: SiteConfig,
    policy: DefaultPolicy,
    *,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> Optional[RawListing]:
    """Turn an extracted item into a complete listing, or None if it has no usable source URL."""
    today = today or date.today()
    rng = rng or random

    source_url = absolute_url(item.source_url, site.base_url)
    if not source_url:
        if policy.missing_source_url != "search_url":
            return None
        source_url = site.search_url

    title = item.title or UNKNOWN_TITLE

    year = item.year
    if not year:
        title_year = parse_year(title)
        if title_year:
            year = int(title_year)
        elif policy.synthetic_fill:
            year = today.year - rng.randrange(10)
        else:
            year = today.year

    price = item.price
    if not price:
        price = rng.randrange(50_000, 550_000) if policy.synthetic_fill else policy.default_price

    mileage = item.mileage
    if not mileage:
        mileage = rng.randrange(10_000, 160_000) if policy.synthetic_fill else policy.default_mileage

    return RawListing(
        title=title,
        price=price,
        year=year,
        mileage=mileage,
        transmission=(item.transmission or policy.default_transmission).lower(),
        fuel_type=(item.fuel_type or policy.default_fuel_type).lower(),
        location=item.location or policy.default_location,
        image_url=resolve_image_url(
            item.image_url,
            site.search_url,
            title,
            blocked_hosts=policy.blocked_image_hosts,
            template=policy.fallback_image_template,
        ),
        source_url=source_url,
        site_name=site.name,
    )


def display_date(now: datetime) -> str:
    # en-ZA long form, e.g. "19 October 2026"
    return f"{now.day} {now:%B %Y}"


def build_event_record(listing: RawListing, now: datetime, country: str = settings.DEFAULT_COUNTRY) -> dict:
    """Column values for a scraped ``events`` row."""
    return dict(
        title=listing.title.strip(),
        description=f"{listing.title}. Listed on {listing.site_name}.",
        date=display_date(now),
        time="Available Now",
        address=listing.location,
        city=listing.location,
        country=country,
        background_image_url=listing.image_url,
        target_date=now,
        creator=listing.site_name,
        category=classify(listing.title),
        ticket_price=listing.price,
        year=listing.year,
        mileage=listing.mileage,
        transmission=listing.transmission,
        fuel_type=listing.fuel_type,
        condition=listing.condition,
        source_url=listing.source_url,
        is_scraped=True,
        created_by=None,
    )
