"""
FastAPI app entrypoint.

One OfflineManager per process, created in the lifespan and released on shutdown.
Maintenance runs on a BackgroundScheduler: cache cleanup, view-history retention, expired deals.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cheapeats.api.routes import areas, cache, deals, views
from cheapeats.config import settings
from cheapeats.core.cache_config import THUMBNAIL_WORKERS
from cheapeats.core.constants import (
    CACHE_CLEANUP_INTERVAL_MINUTES,
    CACHE_CLEANUP_JOB_ID,
    EXPIRED_DEALS_INTERVAL_MINUTES,
    EXPIRED_DEALS_JOB_ID,
    VIEW_HISTORY_CLEANUP_JOB_ID,
)
from cheapeats.db.session import SessionLocal, init_db
from cheapeats.scheduler.cleanup_jobs import (
    run_cache_cleanup_job,
    run_expired_deals_cleanup_job,
    run_view_history_cleanup_job,
)
from cheapeats.services.cache.connectivity import SocketConnectivityMonitor
from cheapeats.services.cache.store import RestaurantCacheStore
from cheapeats.services.cache.thumbnails import HttpImageFetcher
from cheapeats.services.offline import OfflineManager

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

_scheduler = BackgroundScheduler(timezone=settings.schedule_timezone)


def build_offline_manager() -> tuple[OfflineManager, SocketConnectivityMonitor]:
    monitor = SocketConnectivityMonitor(
        settings.connectivity_probe_host,
        settings.connectivity_probe_port,
        unmetered=settings.assume_unmetered,
    )
    store = RestaurantCacheStore(
        SessionLocal,
        settings.thumbnail_dir,
        image_fetcher=HttpImageFetcher(),
        executor=ThreadPoolExecutor(max_workers=THUMBNAIL_WORKERS, thread_name_prefix="cache_worker"),
    )
    manager = OfflineManager(store, monitor, cache_images_on_wifi=settings.cache_images_on_wifi)
    return manager, monitor


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.database_url.startswith("sqlite"):
        # Dev convenience; Postgres deployments run `alembic upgrade head`
        init_db()
    manager, monitor = build_offline_manager()
    monitor.start()
    manager.start()
    app.state.offline_manager = manager

    _scheduler.add_job(
        run_cache_cleanup_job,
        "interval",
        minutes=CACHE_CLEANUP_INTERVAL_MINUTES,
        args=[manager],
        id=CACHE_CLEANUP_JOB_ID,
    )
    _scheduler.add_job(
        run_view_history_cleanup_job,
        "cron",
        hour=4,
        minute=15,
        id=VIEW_HISTORY_CLEANUP_JOB_ID,
    )
    _scheduler.add_job(
        run_expired_deals_cleanup_job,
        "interval",
        minutes=EXPIRED_DEALS_INTERVAL_MINUTES,
        id=EXPIRED_DEALS_JOB_ID,
    )
    _scheduler.start()
    app.state.scheduler = _scheduler
    logger.info("CheapEats backend ready (offline=%s)", manager.is_offline.value)
    yield
    _scheduler.shutdown(wait=False)
    manager.release()
    monitor.stop()
    manager.store.shutdown(wait=False)


app = FastAPI(title="CheapEats", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for a deployed frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_cors_extra = os.getenv("CORS_ORIGINS", "")
if _cors_extra:
    _cors_origins.extend(o.strip() for o in _cors_extra.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cache.router, tags=["cache"])
app.include_router(deals.router, prefix="/deals", tags=["deals"])
app.include_router(views.router, prefix="/views", tags=["views"])
app.include_router(areas.router, prefix="/areas", tags=["areas"])


@app.get("/", include_in_schema=False)
def root():
    return {"message": "CheapEats API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
