# carfeed/services/store.py
from typing import Iterable, List, Optional, Set
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from carfeed.db import SessionLocal
from carfeed.models import Event

LOOKUP_CHUNK = 500

class EventStore:
    """Reads and writes of the ``events`` table used by the ingestion jobs."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self.session_factory = session_factory or SessionLocal

    async def existing_source_urls(self, urls: Iterable[str]) -> Set[str]:
        wanted = list(dict.fromkeys(u for u in urls if u))
        found: Set[str] = set()
        async with self.session_factory() as s:
            for i in range(0, len(wanted), LOOKUP_CHUNK):
                chunk = wanted[i : i + LOOKUP_CHUNK]
                res = await s.execute(select(Event.source_url).where(Event.source_url.in_(chunk)))
                found.update(res.scalars().all())
        return found

    async def insert_many(self, rows: List[dict]) -> int:
        async with self.session_factory() as s:
            async with s.begin():
                events = [Event(**row) for row in rows]
                s.add_all(events)
                await s.flush()
                ids = [e.id for e in events if e.id is not None]
        return len(ids)

    async def update_images(self, rows: List[dict]) -> int:
        """Set ``background_image_url`` for each ``{"id", "background_image_url"}`` row."""
        updated = 0
        async with self.session_factory() as s:
            async with s.begin():
                for row in rows:
                    res = await s.execute(
                        update(Event)
                        .where(Event.id == row["id"])
                        .values(background_image_url=row["background_image_url"])
                    )
                    updated += res.rowcount or 0
        return updated

    async def fetch_scraped(self, limit: int) -> List[dict]:
        q = (
            select(Event.id, Event.title, Event.source_url, Event.background_image_url)
            .where(Event.is_scraped.is_(True))
            .order_by(Event.id)
            .limit(limit)
        )
        async with self.session_factory() as s:
            res = await s.execute(q)
            return [dict(r) for r in res.mappings().all()]
