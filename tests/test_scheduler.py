# tests/test_scheduler.py
from carfeed import workers
from carfeed.config import settings
from carfeed.jobs.scheduler import build_scheduler


def test_daily_jobs_are_registered():
    sched = build_scheduler()
    jobs = {job.id: job for job in sched.get_jobs()}

    assert set(jobs) == {"daily-car-scraper", "refresh-car-images"}
    assert jobs["daily-car-scraper"].func is workers.run_scrape_cycle
    assert jobs["refresh-car-images"].func is workers.run_image_refresh_cycle
    assert jobs["daily-car-scraper"].max_instances == 1


async def test_scheduled_scrape_skips_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "FIRECRAWL_API_KEY", None)
    assert await workers.run_scrape_cycle() is None
