"""
Centralized constants for the offline cache, deals, clustering and scheduler.

Change job IDs or intervals here instead of scattering literals across main and services.
Retention and ceilings come from cache_config (env-driven).
"""
from cheapeats.core.cache_config import (
    CACHE_CLEANUP_INTERVAL_MINUTES,
    CACHE_MAX_AGE_DAYS,
    MAX_CACHE_SIZE_MB,
    MAX_CACHED_RESTAURANTS,
    REPEAT_COOLDOWN_HOURS,
    THUMBNAIL_SIZE,
    VIEW_HISTORY_RETENTION_DAYS,
)

# Scheduler job IDs (must match ids used in main.py add_job)
CACHE_CLEANUP_JOB_ID = "cache_cleanup"
VIEW_HISTORY_CLEANUP_JOB_ID = "view_history_cleanup"
EXPIRED_DEALS_JOB_ID = "expired_deals_cleanup"
EXPIRED_DEALS_INTERVAL_MINUTES = 60

# Restaurant cache (aliased from cache_config)
MAX_CACHE_AGE_DAYS = CACHE_MAX_AGE_DAYS
CACHE_SIZE_CEILING_BYTES = MAX_CACHE_SIZE_MB * 1024 * 1024
THUMBNAIL_JPEG_QUALITY = 80
THUMBNAIL_EXTENSION = ".jpg"
RECENT_READ_LIMIT = 50
NEARBY_READ_LIMIT = 30
CHEAPEST_READ_LIMIT = 20
# Nearby read: ellipse in degrees. 0.722 ~ cos(43.7 deg) so east-west distance is not stretched.
NEARBY_RADIUS_SQUARED = 0.001
NEARBY_LNG_CORRECTION = 0.722

# Prices
CHEAP_PRICE_CEILING = 15.0
FLEXIBLE_PRICE_CEILING = 17.0

# Deals
DEAL_MIN_TITLE_LENGTH = 5
ACTIVE_DEALS_LIMIT = 20
EXPIRING_DEALS_WITHIN_HOURS = 3

# Repeat protection
COOLDOWN_HOURS = REPEAT_COOLDOWN_HOURS
MAX_REPEATS_PER_DAY = 2  # declared; not enforced (cooldown only)
HISTORY_RETENTION_DAYS = VIEW_HISTORY_RETENTION_DAYS

# Cheap area clustering
GRID_SIZE = 0.003  # ~300m at Toronto latitude
MIN_CLUSTER_SIZE = 3
CLUSTER_RADIUS_METERS = 300.0
DEFAULT_CLUSTER_PRICE = 12.0

# Transit
DEFAULT_TRANSIT_RADIUS_METERS = 500.0
WALKING_SPEED_M_PER_MIN = 80.0
