"""Main FastAPI application"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from jirasync import __version__
from jirasync.api import service_hooks
from jirasync.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Crashlytics Jira sync service")
    yield
    logger.info("Stopping Crashlytics Jira sync service")


app = FastAPI(
    title="Crashlytics Jira Sync Service",
    description="Create Jira issues for crash reports and keep their resolution in sync",
    version=__version__,
    lifespan=lifespan,
)

# Optional built-in auth on the service hook routes (see jirasync.security)
if settings.auth_enabled:
    if not settings.auth_username or not settings.auth_password:
        raise RuntimeError("AUTH_ENABLED=true requires AUTH_USERNAME and AUTH_PASSWORD to be set")

app.include_router(service_hooks.router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Crashlytics Jira Sync"}


def run():
    import uvicorn

    uvicorn.run(
        "jirasync.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
