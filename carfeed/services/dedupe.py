# carfeed/services/dedupe.py
from typing import Awaitable, Callable, Iterable, List, Set
from carfeed.schemas import RawListing

SourceUrlLookup = Callable[[List[str]], Awaitable[Set[str]]]

def dedupe_in_batch(listings: Iterable[RawListing]) -> List[RawListing]:
    """First listing per source_url wins, in first-seen order."""
    unique: dict[str, RawListing] = {}
    for listing in listings:
        if listing.source_url and listing.source_url not in unique:
            unique[listing.source_url] = listing
    return list(unique.values())

async def drop_persisted(listings: List[RawListing], lookup: SourceUrlLookup) -> List[RawListing]:
    if not listings:
        return []
    existing = await lookup([l.source_url for l in listings])
    return [l for l in listings if l.source_url not in existing]

async def dedupe(listings: Iterable[RawListing], lookup: SourceUrlLookup) -> List[RawListing]:
    return await drop_persisted(dedupe_in_batch(listings), lookup)
