"""
Marketplace Admin Console - Main Application

FastAPI backend for the admin console of an L&D marketplace:
- PostgreSQL for users, profiles, postings, content and billing
- MongoDB for admin activity documents
- JWT authentication, admin-only routes

Run: uvicorn admin_console.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admin_console import __version__
from admin_console.api.routes import api_router
from admin_console.core.config import get_settings
from admin_console.core.logging import configure_logging, get_logger
from admin_console.core.middleware import AdminActivityMiddleware
from admin_console.db.mongodb import init_mongo_indexes
from admin_console.db.tables import init_db
from admin_console.services.billing_service import seed_default_plans

settings = get_settings()
configure_logging(settings.log_level, settings.debug)
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Marketplace Admin Console",
    description="""
    Admin API for a marketplace connecting companies with L&D professionals.

    ## Panels
    - **Users**: search, suspend/activate, grant admin, delete
    - **Professionals / Companies**: feature and verify profiles
    - **Jobs**: moderate postings
    - **Content**: resources, categories and CMS pages
    - **Payments**: plans, subscriptions, payments, refunds, revenue
    - **Dashboard**: summary cards, growth and activity feed

    ## Databases
    - PostgreSQL: Structured data
    - MongoDB: Admin activity log
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(AdminActivityMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Ensure tables, default plans and MongoDB indexes."""
    try:
        init_db()
        seed_default_plans()
    except Exception as e:
        logger.error("Database initialization failed: %s", e)

    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    """Service status."""
    return {"status": "healthy", "app": "Marketplace Admin Console", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from admin_console.db.postgres import test_postgres_connection
    from admin_console.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
