# carfeed/jobs/scheduler.py
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from carfeed.workers import run_image_refresh_cycle, run_scrape_cycle
from carfeed.config import settings

def build_scheduler() -> AsyncIOScheduler:
    sched = AsyncIOScheduler(timezone="UTC")
    sched.add_job(
        run_scrape_cycle,
        CronTrigger(hour=settings.DAILY_SCRAPE_HOUR, minute=settings.DAILY_SCRAPE_MINUTE),
        id="daily-car-scraper",
        coalesce=True,
        max_instances=1,
    )
    sched.add_job(
        run_image_refresh_cycle,
        CronTrigger(hour=settings.IMAGE_REFRESH_HOUR, minute=settings.DAILY_SCRAPE_MINUTE),
        id="refresh-car-images",
        coalesce=True,
        max_instances=1,
    )
    return sched

async def start_scheduler() -> AsyncIOScheduler:
    sched = build_scheduler()
    sched.start()
    return sched
