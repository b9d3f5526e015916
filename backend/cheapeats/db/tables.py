"""
Single source of truth for database tables that exist after migrations (001).

alembic/env.py and scripts/check_backend.py compare against this list.
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    "cached_restaurants",
    "deals",
    "view_history",
)
