# carfeed/services/synthetic.py
"""Generated South African car listings used to top up a thin import.

Only used when ``SYNTHETIC_LISTINGS`` is enabled; these rows are not real
listings and carry a ``?listing=`` marker in their source_url.
"""
import random
import time
from typing import List, Optional, Sequence

from carfeed.schemas import RawListing
from carfeed.scrapers.sites import SiteConfig
from carfeed.utils.images import fallback_image_url

CARS = (
    ("toyota", ("Corolla", "Hilux", "Fortuner", "RAV4", "Yaris", "Starlet", "Land Cruiser")),
    ("volkswagen", ("Polo", "Golf", "Tiguan", "T-Cross", "Amarok", "Touareg")),
    ("ford", ("Ranger", "EcoSport", "Fiesta", "Focus", "Everest", "Mustang")),
    ("bmw", ("3 Series", "5 Series", "X1", "X3", "X5", "1 Series", "M3")),
    ("mercedes", ("C-Class", "E-Class", "A-Class", "GLA", "GLC", "AMG")),
    ("hyundai", ("i20", "Tucson", "Creta", "Venue", "Santa Fe", "Kona")),
    ("kia", ("Picanto", "Seltos", "Sportage", "Sonet", "Carnival", "Sorento")),
    ("mazda", ("CX-3", "CX-5", "CX-30", "Mazda2", "Mazda3", "BT-50")),
    ("nissan", ("Navara", "X-Trail", "Qashqai", "Magnite", "Patrol", "Micra")),
    ("audi", ("A3", "A4", "Q3", "Q5", "A5", "RS3")),
    ("honda", ("Fit", "Jazz", "HR-V", "CR-V", "Civic", "Accord")),
    ("suzuki", ("Swift", "Vitara", "Jimny", "Baleno", "S-Presso", "Fronx")),
    ("haval", ("Jolion", "H6", "H9", "H2", "F7")),
    ("isuzu", ("D-Max", "MU-X", "KB")),
    ("renault", ("Kwid", "Duster", "Captur", "Clio", "Triber")),
)

CITIES = (
    "Johannesburg", "Cape Town", "Durban", "Pretoria", "Port Elizabeth", "Bloemfontein",
    "East London", "Polokwane", "Nelspruit", "Kimberley", "Sandton", "Centurion",
    "Randburg", "Roodepoort", "Benoni",
)

PREMIUM = {"bmw", "mercedes", "audi"}


def generate_fallback_listings(
    count: int,
    sites: Sequence[SiteConfig],
    rng: Optional[random.Random] = None,
    stamp: Optional[int] = None,
) -> List[RawListing]:
    if count <= 0 or not sites:
        return []
    rng = rng or random.Random()
    stamp = stamp if stamp is not None else int(time.time() * 1000)

    listings = []
    for i in range(count):
        brand, models = rng.choice(CARS)
        model = rng.choice(models)
        year = 2015 + rng.randrange(10)
        site = rng.choice(sites)
        base = 300_000 + rng.randrange(700_000) if brand in PREMIUM else 100_000 + rng.randrange(400_000)
        title = f"{year} {brand.capitalize()} {model}"
        listings.append(
            RawListing(
                title=title,
                price=round(base / 1000) * 1000,
                year=year,
                mileage=5_000 + rng.randrange(180_000),
                transmission=rng.choice(("manual", "automatic")),
                fuel_type=rng.choice(("petrol", "diesel")),
                location=rng.choice(CITIES),
                image_url=fallback_image_url(title),
                source_url=f"{site.search_url}?listing={stamp}-{i}",
                site_name=site.name,
                condition=rng.choice(("excellent", "good", "fair")),
            )
        )
    return listings
