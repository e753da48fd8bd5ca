"""
Table definitions (SQLAlchemy Core).

Routes and services query these tables with raw text() SQL; the metadata
here exists so the schema can be created with init_db() on PostgreSQL in
production and SQLite in tests.
"""

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Text, Boolean, DateTime,
    ForeignKey, func, false, true
)

from admin_console.core.logging import get_logger

logger = get_logger(__name__)

metadata = MetaData()


users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True),
    Column("username", String(100), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("user_type", String(20), nullable=False),  # professional | company | admin
    Column("is_admin", Boolean, nullable=False, server_default=false()),
    Column("blocked", Boolean, nullable=False, server_default=false()),
    Column("blocked_reason", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("last_login", DateTime),
)

professional_profiles = Table(
    "professional_profiles", metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("title", String(200)),
    Column("bio", Text),
    Column("location", String(200)),
    Column("rate_per_hour", Integer),
    Column("years_experience", Integer, server_default="0"),
    Column("rating", Integer, server_default="0"),
    Column("review_count", Integer, server_default="0"),
    Column("featured", Boolean, nullable=False, server_default=false()),
    Column("verified", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

company_profiles = Table(
    "company_profiles", metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("company_name", String(200), nullable=False),
    Column("industry", String(100), nullable=False),
    Column("description", Text, nullable=False),
    Column("website", String(255)),
    Column("size", String(20), nullable=False),  # small | medium | large | enterprise
    Column("location", String(200), nullable=False),
    Column("featured", Boolean, nullable=False, server_default=false()),
    Column("verified", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

job_postings = Table(
    "job_postings", metadata,
    Column("id", Integer, primary_key=True),
    Column("company_id", Integer, ForeignKey("company_profiles.id"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=False),
    Column("location", String(200), nullable=False),
    Column("job_type", String(20), nullable=False),
    Column("min_compensation", Integer),
    Column("max_compensation", Integer),
    Column("compensation_unit", String(20)),
    Column("requirements", Text, nullable=False, server_default=""),
    Column("remote", Boolean, nullable=False, server_default=false()),
    Column("featured", Boolean, nullable=False, server_default=false()),
    Column("archived", Boolean, nullable=False, server_default=false()),
    Column("status", String(20), nullable=False, server_default="open"),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("modified_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("expires_at", DateTime),
)

resource_categories = Table(
    "resource_categories", metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(100), nullable=False, unique=True),
    Column("description", Text),
)

resources = Table(
    "resources", metadata,
    Column("id", Integer, primary_key=True),
    Column("author_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("content_url", String(500)),
    Column("resource_type", String(20), nullable=False),
    Column("category_id", Integer, ForeignKey("resource_categories.id")),
    Column("image_url", String(500)),
    Column("featured", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

page_contents = Table(
    "page_contents", metadata,
    Column("id", Integer, primary_key=True),
    Column("slug", String(200), nullable=False, unique=True),
    Column("title", String(200), nullable=False),
    Column("content", Text, nullable=False),
    Column("meta_title", String(200)),
    Column("meta_description", String(300)),
    Column("last_edited_by", Integer, ForeignKey("users.id")),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

subscription_plans = Table(
    "subscription_plans", metadata,
    Column("id", String(50), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("plan_type", String(20), nullable=False),  # professional | company
    Column("price_cents", Integer, nullable=False),
    Column("currency", String(3), nullable=False, server_default="usd"),
    Column("billing_interval", String(10), nullable=False, server_default="month"),
    Column("features", Text, nullable=False, server_default="[]"),  # JSON list
    Column("active", Boolean, nullable=False, server_default=true()),
)

subscriptions = Table(
    "subscriptions", metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("plan_id", String(50), ForeignKey("subscription_plans.id"), nullable=False),
    Column("status", String(20), nullable=False, server_default="active"),
    Column("started_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("current_period_end", DateTime),
    Column("canceled_at", DateTime),
)

payments = Table(
    "payments", metadata,
    Column("id", String(64), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id")),
    Column("payment_type", String(20), nullable=False),  # subscription | consultation
    Column("status", String(20), nullable=False),
    Column("amount_cents", Integer, nullable=False),
    Column("refunded_cents", Integer, nullable=False, server_default="0"),
    Column("currency", String(3), nullable=False, server_default="usd"),
    Column("description", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

system_settings = Table(
    "system_settings", metadata,
    Column("setting_key", String(100), primary_key=True),
    Column("value", Text),
    Column("description", Text),
    Column("updated_by", Integer),
    Column("updated_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)


def init_db(bind=None) -> None:
    """Create all tables that do not exist yet."""
    if bind is None:
        from admin_console.db.postgres import engine
        bind = engine
    metadata.create_all(bind)
    logger.info("Database tables ensured (%d tables)", len(metadata.tables))


def drop_db(bind=None) -> None:
    if bind is None:
        from admin_console.db.postgres import engine
        bind = engine
    metadata.drop_all(bind)
