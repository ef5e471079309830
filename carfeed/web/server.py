# carfeed/web/server.py
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from carfeed.config import Settings, settings
from carfeed.schemas import JobRequest, JobResponse
from carfeed.scrapers.base import BaseExtractor
from carfeed.scrapers.firecrawl import FirecrawlExtractor
from carfeed.scrapers.sites import get_site, select_sites
from carfeed.services.images import refresh_images
from carfeed.services.ingest import import_listings, run_ingestion
from carfeed.services.store import EventStore
from carfeed.utils.images import image_hosts

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}
MISSING_KEY = "Firecrawl API key not configured"
SINGLE_SITE_DEFAULT_LIMIT = 50


def _ok(data: dict) -> JSONResponse:
    return JSONResponse(JobResponse(success=True, data=data).model_dump(exclude_none=True))


def _fail(error: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(JobResponse(success=False, error=error).model_dump(exclude_none=True), status_code=status_code)


async def _read_job(request: Request) -> JobRequest:
    # a missing or malformed body means "use the defaults"
    try:
        body = await request.json()
    except ValueError:
        return JobRequest()
    if not isinstance(body, dict):
        return JobRequest()
    try:
        return JobRequest.model_validate(body)
    except ValidationError:
        return JobRequest()


def create_app(
    store: Optional[EventStore] = None,
    extractor_factory: Optional[Callable[[str], BaseExtractor]] = None,
    app_settings: Settings = settings,
) -> FastAPI:
    app = FastAPI(title="carfeed")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    store = store or EventStore()
    if extractor_factory is None:
        def extractor_factory(api_key: str) -> BaseExtractor:
            return FirecrawlExtractor.from_settings(api_key, app_settings)

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.options("/functions/{name}")
    async def preflight(name: str):
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.api_route("/functions/scrape-listings", methods=["GET", "POST"])
    async def scrape_listings(request: Request):
        api_key = app_settings.FIRECRAWL_API_KEY
        if not api_key:
            return _fail(MISSING_KEY)
        job = await _read_job(request)
        try:
            result = await run_ingestion(
                job.limit,
                extractor=extractor_factory(api_key),
                store=store,
                sites=select_sites(app_settings.SCRAPE_SITES),
                fallback=job.fallback,
                overhead=app_settings.SCRAPE_PER_SITE_OVERHEAD,
                min_limit=app_settings.SCRAPE_MIN_LIMIT,
                batch_size=app_settings.INSERT_BATCH_SIZE,
                max_concurrency=app_settings.SCRAPE_MAX_CONCURRENCY,
                synthetic_listings=app_settings.SYNTHETIC_LISTINGS,
                default_limit=app_settings.SCRAPE_DEFAULT_LIMIT,
                country=app_settings.DEFAULT_COUNTRY,
            )
        except Exception as e:
            logger.exception("Error in scrape-listings")
            return _fail(str(e) or "Unknown error")
        return _ok(result.to_dict())

    @app.api_route("/functions/scrape-site", methods=["GET", "POST"])
    async def scrape_site(request: Request):
        api_key = app_settings.FIRECRAWL_API_KEY
        if not api_key:
            return _fail(MISSING_KEY)
        job = await _read_job(request)
        site = get_site(job.site or "")
        if site is None:
            return _fail("Invalid site specified", status_code=400)
        limit = job.limit or SINGLE_SITE_DEFAULT_LIMIT
        try:
            listings = await extractor_factory(api_key).extract_listings(site, limit)
            result = await import_listings(
                listings,
                store,
                limit,
                batch_size=app_settings.INSERT_BATCH_SIZE,
                source_label=site.name,
                country=app_settings.DEFAULT_COUNTRY,
            )
        except Exception as e:
            logger.exception("Error in scrape-site")
            return _fail(str(e) or "Unknown error")
        return _ok(result.to_dict())

    @app.api_route("/functions/refresh-images", methods=["GET", "POST"])
    async def refresh(request: Request):
        job = await _read_job(request)
        api_key = app_settings.FIRECRAWL_API_KEY
        # the fallback variant never calls the extraction API
        if not api_key and not job.fallback:
            return _fail(MISSING_KEY)
        try:
            result = await refresh_images(
                job.limit or app_settings.REFRESH_DEFAULT_LIMIT,
                store=store,
                extractor=extractor_factory(api_key) if api_key else None,
                fallback=job.fallback,
                batch_size=app_settings.REFRESH_BATCH_SIZE,
                max_concurrency=app_settings.REFRESH_MAX_CONCURRENCY,
                blocked_hosts=image_hosts(app_settings.BLOCKED_IMAGE_HOSTS),
                template=app_settings.FALLBACK_IMAGE_TEMPLATE,
            )
        except Exception as e:
            logger.exception("Error in refresh-images")
            return _fail(str(e) or "Unknown error")
        return _ok(result.to_dict())

    return app
