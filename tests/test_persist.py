# tests/test_persist.py
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from carfeed.models import Event
from carfeed.services.persist import persist_in_batches


def rows(n, prefix="https://x/"):
    return [{"title": f"Car {i}", "source_url": f"{prefix}{i}", "is_scraped": True} for i in range(n)]


async def test_partial_failure_counts_only_written_batches():
    sizes = []

    async def write(batch):
        sizes.append(len(batch))
        if len(sizes) == 2:
            raise OperationalError("INSERT INTO events", {}, Exception("connection reset"))
        return len(batch)

    assert await persist_in_batches(rows(45), 20, write) == 25
    assert sizes == [20, 20, 5]


async def test_all_batches_succeed():
    async def write(batch):
        return len(batch)

    assert await persist_in_batches(rows(45), 20, write) == 45
    assert await persist_in_batches([], 20, write) == 0


async def test_non_database_errors_propagate():
    async def write(batch):
        raise TypeError("bad row")

    with pytest.raises(TypeError):
        await persist_in_batches(rows(3), 2, write)


async def test_batch_size_must_be_positive():
    async def write(batch):
        return len(batch)

    with pytest.raises(ValueError):
        await persist_in_batches(rows(3), 0, write)


async def test_duplicate_source_url_fails_only_its_batch(store, session_factory):
    records = rows(3) + [{"title": "Dup", "source_url": "https://x/0", "is_scraped": True}]

    inserted = await persist_in_batches(records, 2, store.insert_many)

    assert inserted == 2
    async with session_factory() as s:
        assert (await s.execute(select(func.count(Event.id)))).scalar_one() == 2


async def test_update_images_counts_matched_rows(store, session_factory):
    await store.insert_many(rows(2))
    async with session_factory() as s:
        ids = (await s.execute(select(Event.id).order_by(Event.id))).scalars().all()

    updated = await store.update_images([
        {"id": ids[0], "background_image_url": "https://cdn.example.co.za/new.jpg"},
        {"id": 9999, "background_image_url": "https://cdn.example.co.za/none.jpg"},
    ])

    assert updated == 1
    async with session_factory() as s:
        row = await s.get(Event, ids[0])
        assert row.background_image_url == "https://cdn.example.co.za/new.jpg"
