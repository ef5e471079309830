# tests/test_ingest.py
from datetime import datetime, timezone

from sqlalchemy import select

from carfeed.models import Event
from carfeed.scrapers.sites import select_sites
from carfeed.services.ingest import import_listings, run_ingestion

from fakes import FakeExtractor, make_listing

SITES = select_sites(["carfind", "surf4cars", "autotrader"])
NOW = datetime(2026, 10, 19, 5, 7, tzinfo=timezone.utc)


async def ingest(fake, store, limit=10, **kw):
    kw.setdefault("min_limit", 0)
    kw.setdefault("overhead", 0)
    return await run_ingestion(limit, extractor=fake, store=store, sites=SITES, batch_size=20, now=NOW, **kw)


async def all_events(session_factory):
    async with session_factory() as s:
        return (await s.execute(select(Event).order_by(Event.id))).scalars().all()


async def test_outage_on_every_site_reports_nothing_to_import(store, session_factory):
    result = await ingest(FakeExtractor(), store)

    assert result.to_dict() == {"inserted": 0, "message": "No listings found to import"}
    assert await all_events(session_factory) == []


async def test_cross_posted_listing_is_inserted_once(store, session_factory):
    fake = FakeExtractor(by_site={
        "carfind": [make_listing("https://x/y", site_name="CarFind")],
        "surf4cars": [make_listing("https://x/y", site_name="Surf4Cars")],
    })

    result = await ingest(fake, store)

    assert result.inserted == 1
    assert result.total_scraped == 2
    assert result.skipped == 1
    assert result.sites == 3
    events = await all_events(session_factory)
    assert len(events) == 1
    event = events[0]
    assert event.source_url == "https://x/y"
    assert event.is_scraped is True
    assert event.created_by is None
    assert event.category == "toyota"
    assert event.ticket_price == 189900
    assert event.date == "19 October 2026"


async def test_second_run_inserts_nothing_new(store):
    fake = FakeExtractor(by_site={"carfind": [make_listing("https://x/1"), make_listing("https://x/2")]})
    assert (await ingest(fake, store)).inserted == 2

    again = await ingest(fake, store)

    assert again.to_dict() == {"inserted": 0, "skipped": 2, "message": "All listings already exist"}


async def test_only_new_listings_are_inserted(store, session_factory):
    await ingest(FakeExtractor(by_site={"carfind": [make_listing("https://x/1")]}), store)
    fake = FakeExtractor(by_site={"carfind": [make_listing("https://x/1"), make_listing("https://x/2", title="2020 VW Polo")]})

    result = await ingest(fake, store)

    assert result.inserted == 1
    assert result.skipped == 1
    assert [e.category for e in await all_events(session_factory)] == ["toyota", "volkswagen"]


async def test_new_listings_are_capped_at_the_target(store):
    fake = FakeExtractor(by_site={"carfind": [make_listing(f"https://x/{i}") for i in range(9)]})
    result = await ingest(fake, store, limit=4, overhead=10)
    assert result.inserted == 4
    assert result.truncated == 5
    assert result.skipped == 0


async def test_duplicates_and_cap_are_counted_separately(store):
    await ingest(FakeExtractor(by_site={"carfind": [make_listing("https://x/0")]}), store)
    fake = FakeExtractor(by_site={"carfind": [make_listing(f"https://x/{i}") for i in range(6)]})

    result = await ingest(fake, store, limit=3, overhead=10)

    assert result.inserted == 3
    assert result.skipped == 1
    assert result.truncated == 2
    assert result.total_scraped == 6


async def test_minimum_target_applies_to_small_limits(store):
    fake = FakeExtractor(by_site={"carfind": [make_listing(f"https://x/{i}") for i in range(9)]})
    await ingest(fake, store, limit=2, min_limit=5)
    assert sorted(fake.calls) == [("autotrader", 2), ("carfind", 2), ("surf4cars", 2)]


async def test_fallback_listings_need_the_toggle(store):
    disabled = await ingest(FakeExtractor(), store, limit=3, fallback=True, synthetic_listings=False)
    assert disabled.inserted == 0

    enabled = await ingest(FakeExtractor(), store, limit=3, fallback=True, synthetic_listings=True)
    assert enabled.inserted == 3
    assert enabled.total_scraped == 3


async def test_single_site_import_names_the_site(store):
    result = await import_listings([make_listing("https://x/1")], store, 10, source_label="WeBuyCars", now=NOW)
    assert result.message == "Imported 1 new used car listings from WeBuyCars."
