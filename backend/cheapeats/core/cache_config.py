"""
Offline cache policy config. .env is the source of truth; these defaults apply only when
the env var is unset. All values read at import time.

Env vars: CACHE_MAX_AGE_DAYS, MAX_CACHED_RESTAURANTS, MAX_CACHE_SIZE_MB, THUMBNAIL_SIZE,
THUMBNAIL_FETCH_TIMEOUT_SECONDS, THUMBNAIL_WORKERS, REPEAT_COOLDOWN_HOURS,
VIEW_HISTORY_RETENTION_DAYS, CACHE_CLEANUP_INTERVAL_MINUTES, CONNECTIVITY_POLL_SECONDS.

Out-of-range values are clamped, unparsable values fall back to the default.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load backend/.env so cache config sees env vars regardless of entry point
# (scripts/tests/workers that import cache_config directly included)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_env_path = _backend_dir / ".env"
_env_paths = [_env_path]
if Path.cwd() != _backend_dir:
    _env_paths.extend([Path.cwd() / ".env", Path.cwd() / "backend" / ".env"])
for _p in _env_paths:
    if _p.exists():
        load_dotenv(_p, override=False)
        break
else:
    load_dotenv(_env_path, override=False)  # load_dotenv no-ops if file missing

_log = logging.getLogger(__name__)


def _int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = os.environ.get(key)
    if raw is None:
        v = default
    else:
        try:
            v = int(raw.strip())
        except ValueError:
            v = default
    if min_val is not None and v < min_val:
        v = min_val
    if max_val is not None and v > max_val:
        v = max_val
    return v


def _float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    raw = os.environ.get(key)
    if raw is None:
        v = default
    else:
        try:
            v = float(raw.strip())
        except ValueError:
            v = default
    if min_val is not None and v < min_val:
        v = min_val
    if max_val is not None and v > max_val:
        v = max_val
    return v


# -----------------------------------------------------------------------------
# Restaurant cache retention and ceilings
# -----------------------------------------------------------------------------
CACHE_MAX_AGE_DAYS = _int("CACHE_MAX_AGE_DAYS", 7, min_val=1, max_val=30)
MAX_CACHED_RESTAURANTS = _int("MAX_CACHED_RESTAURANTS", 200, min_val=10, max_val=5000)
MAX_CACHE_SIZE_MB = _int("MAX_CACHE_SIZE_MB", 50, min_val=1, max_val=1024)

# -----------------------------------------------------------------------------
# Thumbnails: fixed pixel box, bounded fetch, small worker pool
# -----------------------------------------------------------------------------
THUMBNAIL_SIZE = _int("THUMBNAIL_SIZE", 200, min_val=32, max_val=1024)
THUMBNAIL_FETCH_TIMEOUT_SECONDS = _float("THUMBNAIL_FETCH_TIMEOUT_SECONDS", 5.0, min_val=0.5, max_val=60.0)
THUMBNAIL_WORKERS = _int("THUMBNAIL_WORKERS", 4, min_val=1, max_val=16)

# -----------------------------------------------------------------------------
# Repeat protection / view history
# -----------------------------------------------------------------------------
REPEAT_COOLDOWN_HOURS = _int("REPEAT_COOLDOWN_HOURS", 24, min_val=1, max_val=168)
VIEW_HISTORY_RETENTION_DAYS = _int("VIEW_HISTORY_RETENTION_DAYS", 7, min_val=1, max_val=90)

# -----------------------------------------------------------------------------
# Scheduler / connectivity polling
# -----------------------------------------------------------------------------
CACHE_CLEANUP_INTERVAL_MINUTES = _int("CACHE_CLEANUP_INTERVAL_MINUTES", 360, min_val=5, max_val=1440)
CONNECTIVITY_POLL_SECONDS = _int("CONNECTIVITY_POLL_SECONDS", 15, min_val=2, max_val=300)

# Log effective config at import so each environment can verify env vars are applied
_log.info(
    "Cache config (from env): max_age_days=%s max_restaurants=%s max_size_mb=%s "
    "thumbnail_size=%s thumbnail_timeout=%s cooldown_hours=%s history_retention_days=%s",
    CACHE_MAX_AGE_DAYS,
    MAX_CACHED_RESTAURANTS,
    MAX_CACHE_SIZE_MB,
    THUMBNAIL_SIZE,
    THUMBNAIL_FETCH_TIMEOUT_SECONDS,
    REPEAT_COOLDOWN_HOURS,
    VIEW_HISTORY_RETENTION_DAYS,
)


@dataclass(frozen=True)
class CacheConfig:
    """Snapshot of cache config for passing around (e.g. tests)."""
    max_age_days: int
    max_cached_restaurants: int
    max_cache_size_mb: int
    thumbnail_size: int
    thumbnail_fetch_timeout_seconds: float
    thumbnail_workers: int
    repeat_cooldown_hours: int
    view_history_retention_days: int


def get_cache_config() -> CacheConfig:
    return CacheConfig(
        max_age_days=CACHE_MAX_AGE_DAYS,
        max_cached_restaurants=MAX_CACHED_RESTAURANTS,
        max_cache_size_mb=MAX_CACHE_SIZE_MB,
        thumbnail_size=THUMBNAIL_SIZE,
        thumbnail_fetch_timeout_seconds=THUMBNAIL_FETCH_TIMEOUT_SECONDS,
        thumbnail_workers=THUMBNAIL_WORKERS,
        repeat_cooldown_hours=REPEAT_COOLDOWN_HOURS,
        view_history_retention_days=VIEW_HISTORY_RETENTION_DAYS,
    )
