"""Offline cache tables: cached_restaurants, deals, view_history.

cached_restaurants: last-seen copy of live results, bounded by count/age/bytes in the app.
deals: recurring or time-boxed deals; valid_days is a 7-bit weekday mask (0 or 127 = every day).
view_history: append-only, pruned after a week; drives repeat protection.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "cached_restaurants",
        sa.Column("id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("cuisine", sa.String(128), nullable=False, server_default=""),
        sa.Column("address", sa.String(512), nullable=False, server_default=""),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("price_level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("near_ttc", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_student_discount", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("average_price", sa.Float(), nullable=True),
        sa.Column("price_source", sa.String(32), nullable=False, server_default="UNKNOWN"),
        sa.Column("is_open_now", sa.Boolean(), nullable=True),
        sa.Column("opening_hours_json", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("thumbnail_path", sa.Text(), nullable=True),
        sa.Column("cached_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_accessed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("data_freshness", sa.String(16), nullable=False, server_default="CACHED"),
        sa.Column("cached_near_lat", sa.Float(), nullable=True),
        sa.Column("cached_near_lng", sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cached_restaurants_lat_lng", "cached_restaurants", ["latitude", "longitude"], unique=False)
    op.create_index("ix_cached_restaurants_rating", "cached_restaurants", ["rating"], unique=False)
    op.create_index("ix_cached_restaurants_near_ttc", "cached_restaurants", ["near_ttc"], unique=False)
    op.create_index("ix_cached_restaurants_average_price", "cached_restaurants", ["average_price"], unique=False)
    op.create_index("ix_cached_restaurants_last_accessed_at", "cached_restaurants", ["last_accessed_at"], unique=False)

    op.create_table(
        "deals",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("restaurant_id", sa.String(128), nullable=False),
        sa.Column("restaurant_name", sa.String(256), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("original_price", sa.Float(), nullable=True),
        sa.Column("deal_price", sa.Float(), nullable=False),
        sa.Column("deal_type", sa.String(32), nullable=False, server_default="DAILY_SPECIAL"),
        sa.Column("source", sa.String(32), nullable=False, server_default="OFFICIAL"),
        sa.Column("valid_days", sa.Integer(), nullable=False, server_default="127"),
        sa.Column("start_time", sa.String(5), nullable=True),
        sa.Column("end_time", sa.String(5), nullable=True),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("report_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("submitted_by", sa.String(128), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_deals_restaurant_id", "deals", ["restaurant_id"], unique=False)
    op.create_index("ix_deals_deal_price", "deals", ["deal_price"], unique=False)
    op.create_index("ix_deals_deal_type", "deals", ["deal_type"], unique=False)
    op.create_index("ix_deals_valid_days", "deals", ["valid_days"], unique=False)
    op.create_index("ix_deals_valid_until", "deals", ["valid_until"], unique=False)

    op.create_table(
        "view_history",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("restaurant_id", sa.String(128), nullable=False),
        sa.Column("viewed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("source", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_view_history_restaurant_id", "view_history", ["restaurant_id"], unique=False)
    op.create_index("ix_view_history_viewed_at", "view_history", ["viewed_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_view_history_viewed_at", table_name="view_history")
    op.drop_index("ix_view_history_restaurant_id", table_name="view_history")
    op.drop_table("view_history")
    op.drop_index("ix_deals_valid_until", table_name="deals")
    op.drop_index("ix_deals_valid_days", table_name="deals")
    op.drop_index("ix_deals_deal_type", table_name="deals")
    op.drop_index("ix_deals_deal_price", table_name="deals")
    op.drop_index("ix_deals_restaurant_id", table_name="deals")
    op.drop_table("deals")
    op.drop_index("ix_cached_restaurants_last_accessed_at", table_name="cached_restaurants")
    op.drop_index("ix_cached_restaurants_average_price", table_name="cached_restaurants")
    op.drop_index("ix_cached_restaurants_near_ttc", table_name="cached_restaurants")
    op.drop_index("ix_cached_restaurants_rating", table_name="cached_restaurants")
    op.drop_index("ix_cached_restaurants_lat_lng", table_name="cached_restaurants")
    op.drop_table("cached_restaurants")
