# carfeed/scrapers/sites.py
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

@dataclass(frozen=True)
class SiteConfig:
    key: str
    name: str
    search_url: str
    base_url: str


def _site(key: str, name: str, base_url: str, path: str) -> SiteConfig:
    return SiteConfig(key=key, name=name, search_url=base_url + path, base_url=base_url)


ALL_SITES: Mapping[str, SiteConfig] = MappingProxyType({
    s.key: s
    for s in (
        _site("carfind", "CarFind", "https://www.carfind.co.za", "/used-cars"),
        _site("surf4cars", "Surf4Cars", "https://www.surf4cars.co.za", "/used-cars-for-sale-in-south-africa"),
        _site("autotrader", "AutoTrader", "https://www.autotrader.co.za", "/cars-for-sale"),
        _site("webuycars", "WeBuyCars", "https://www.webuycars.co.za", "/buy-a-car"),
        _site("carscoza", "Cars.co.za", "https://www.cars.co.za", "/usedcars"),
        _site("cittoncars", "Citton Cars", "https://www.cittoncars.co.za", "/used-cars/"),
        _site("carchaser", "CarChaser", "https://www.carchaser.co.za", "/used-cars-for-sale"),
    )
})

# Older clients still post {"site": "carsza"}
SITE_ALIASES: Mapping[str, str] = MappingProxyType({"carsza": "carscoza"})

DEFAULT_SITE_KEYS = ("carfind", "surf4cars", "autotrader", "webuycars", "carscoza")
DAILY_SITE_KEYS = ("carfind", "cittoncars", "surf4cars", "carchaser", "carscoza")


def get_site(key: str, registry: Mapping[str, SiteConfig] = ALL_SITES) -> SiteConfig | None:
    key = (key or "").strip().lower()
    return registry.get(SITE_ALIASES.get(key, key))


def select_sites(keys: Iterable[str], registry: Mapping[str, SiteConfig] = ALL_SITES) -> tuple[SiteConfig, ...]:
    """Resolve site keys against the registry, keeping order. Unknown keys raise."""
    sites = []
    for key in keys:
        site = get_site(key, registry)
        if site is None:
            raise KeyError(f"unknown site: {key}")
        if site not in sites:
            sites.append(site)
    return tuple(sites)
