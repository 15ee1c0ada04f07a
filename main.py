#!/usr/bin/env python3
"""
GitHub Review Helper
Main application entry point
"""

import logging
import shutil
import sys
import tempfile
from pathlib import Path

import uvicorn
from fastapi import FastAPI
import structlog

from src.api.webhooks import router as webhook_router
from src.api.health import router as health_router
from src.services.shared_services import close_services, configure_repos_base_path, get_git_service
from config.settings import settings

logging.basicConfig(
    format="%(message)s",
    stream=sys.stdout,
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Create FastAPI application
app = FastAPI(
    title="GitHub Review Helper",
    description="Squashes fixup commits and tracks peer review through commit statuses",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)

# Include routers
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(webhook_router, tags=["webhooks"])

# Set when the clones live in a temporary directory owned by this process
_temporary_repos_dir = None


@app.on_event("startup")
async def startup_event():
    """Prepare the clone directory and shared services"""
    global _temporary_repos_dir

    repos_base_path = settings.REPOS_BASE_PATH
    if repos_base_path is None:
        _temporary_repos_dir = Path(tempfile.mkdtemp(prefix="github-review-helper"))
        repos_base_path = _temporary_repos_dir

    configure_repos_base_path(repos_base_path)
    get_git_service()

    logger.info(
        "Starting GitHub Review Helper",
        host=settings.HOST,
        port=settings.PORT,
        repos_base_path=str(repos_base_path),
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up on shutdown"""
    logger.info("Shutting down GitHub Review Helper")
    await close_services()
    if _temporary_repos_dir is not None:
        shutil.rmtree(_temporary_repos_dir, ignore_errors=True)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT,
    )
