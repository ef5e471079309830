# carfeed/utils/images.py
from typing import AbstractSet, FrozenSet, Iterable, Optional
from urllib.parse import quote, urljoin, urlparse

from carfeed.config import settings
from carfeed.utils.titles import parse_make_model, parse_year


def image_hosts(hosts: Iterable[str]) -> FrozenSet[str]:
    return frozenset(h.strip().lower() for h in hosts if h.strip())


BLOCKED_IMAGE_HOSTS = image_hosts(settings.BLOCKED_IMAGE_HOSTS)
FALLBACK_IMAGE_TEMPLATE = settings.FALLBACK_IMAGE_TEMPLATE


def absolute_url(url: Optional[str], base_url: str) -> Optional[str]:
    """Resolve ``url`` against ``base_url``; None when missing or unparseable."""
    url = (url or "").strip()
    if not url:
        return None
    try:
        resolved = urljoin(base_url, url)
        parsed = urlparse(resolved)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    return resolved


def is_real_image_url(url: Optional[str], blocked_hosts: AbstractSet[str] = BLOCKED_IMAGE_HOSTS) -> bool:
    if not url:
        return False
    try:
        parsed = urlparse(url)
        hostname = (parsed.hostname or "").lower()
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not hostname:
        return False
    for blocked in blocked_hosts:
        if hostname == blocked or hostname.endswith("." + blocked):
            return False
    return "placeholder" not in url.lower()


def fallback_image_url(title: Optional[str], template: str = FALLBACK_IMAGE_TEMPLATE) -> str:
    make, model = parse_make_model(title)
    parts = [p for p in (parse_year(title), make, model, "car") if p]
    return template.format(query=quote(" ".join(parts), safe=""))


def resolve_image_url(
    raw_url: Optional[str],
    source_page_url: str,
    title: Optional[str],
    *,
    blocked_hosts: AbstractSet[str] = BLOCKED_IMAGE_HOSTS,
    template: str = FALLBACK_IMAGE_TEMPLATE,
) -> str:
    """Absolute listing photo for ``raw_url``, or a generated stock-photo query.

    Extracted images are often missing, relative, or a site's generic
    placeholder; anything that does not look like a real photo is replaced by
    the fallback built from the title.
    """
    resolved = absolute_url(raw_url, source_page_url)
    if is_real_image_url(resolved, blocked_hosts):
        return resolved
    return fallback_image_url(title, template)
