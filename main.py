# main.py: FastAPI trigger endpoints + APScheduler daily jobs on one event loop
import asyncio
import logging

import uvicorn
from carfeed.config import settings
from carfeed.db import init_db
from carfeed.jobs.scheduler import start_scheduler
from carfeed.web.server import create_app

logger = logging.getLogger(__name__)
logging.basicConfig(
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
)

async def run():
    # 1) DB
    await init_db()

    # 2) Scheduler
    scheduler = await start_scheduler() if settings.SCHEDULER_ENABLED else None

    # 3) FastAPI via Uvicorn (blocks until Ctrl+C / shutdown)
    server = uvicorn.Server(
        uvicorn.Config(
            create_app(),
            host=settings.WEB_HOST,
            port=settings.WEB_PORT,
            log_level=settings.LOG_LEVEL.lower(),
        )
    )

    try:
        await server.serve()
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)

if __name__ == "__main__":
    try:
        asyncio.run(run())
    except (KeyboardInterrupt, SystemExit):
        pass
