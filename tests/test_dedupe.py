# tests/test_dedupe.py
from carfeed.services.dedupe import dedupe, dedupe_in_batch, drop_persisted

from fakes import make_listing


def test_same_source_url_keeps_the_first_seen():
    batch = [
        make_listing("https://x/y", title="first"),
        make_listing("https://x/z"),
        make_listing("https://x/y", title="second"),
    ]
    unique = dedupe_in_batch(batch)
    assert [l.source_url for l in unique] == ["https://x/y", "https://x/z"]
    assert unique[0].title == "first"


async def test_already_persisted_urls_are_excluded():
    asked = []

    async def lookup(urls):
        asked.append(list(urls))
        return {"https://x/old"}

    batch = [make_listing("https://x/new1"), make_listing("https://x/old"), make_listing("https://x/new2"),
             make_listing("https://x/new1")]
    result = await dedupe(batch, lookup)

    assert [l.source_url for l in result] == ["https://x/new1", "https://x/new2"]
    assert asked == [["https://x/new1", "https://x/old", "https://x/new2"]]


async def test_empty_batch_skips_the_lookup():
    async def lookup(urls):
        raise AssertionError("should not be called")

    assert await drop_persisted([], lookup) == []


async def test_store_lookup_finds_persisted_urls(store):
    await store.insert_many([
        {"title": "Old", "source_url": "https://x/old", "is_scraped": True},
        {"title": "User car", "source_url": None, "is_scraped": False, "created_by": "user-1"},
    ])
    found = await store.existing_source_urls(["https://x/old", "https://x/new", "https://x/old", ""])
    assert found == {"https://x/old"}
