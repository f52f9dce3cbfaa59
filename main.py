from fastapi import FastAPI
from linkstats_app.config import settings
from linkstats_app.database.connection import engine, Base
from linkstats_app.logging_config import configure_logging
from linkstats_app.api.v1 import links, analytics, redirect

# Import models to ensure they're registered with Base
from linkstats_app.models import Link, AnalyticsEventRow  # noqa: F401

configure_logging()

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Short links with click analytics: totals, uniques, breakdowns and time series",
    debug=settings.debug
)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(links.router, prefix="/api/v1")
app.include_router(analytics.router, prefix="/api/v1")
# Catch-all /{short_code}; must stay last
app.include_router(redirect.router)
