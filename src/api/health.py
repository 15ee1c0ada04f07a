"""
Health check endpoints
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from git import Git
from git.exc import GitCommandError, GitCommandNotFound

from config.settings import settings

router = APIRouter()
logger = structlog.get_logger()

VERSION = "1.0.0"


@router.get("")
async def health_check() -> JSONResponse:
    """
    Health check endpoint for monitoring
    """
    return JSONResponse(
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": VERSION,
            "service": "github-review-helper",
        },
        status_code=200,
    )


@router.get("/ready")
def readiness_check() -> JSONResponse:
    """
    Readiness check endpoint for deployment
    """
    checks = {
        "git": check_git_availability(),
        "github_token": bool(settings.GITHUB_TOKEN),
        "webhook_secret": bool(settings.GITHUB_WEBHOOK_SECRET),
    }

    all_ready = all(checks.values())
    if not all_ready:
        logger.warning("Readiness check failed", checks=checks)

    return JSONResponse(
        content={
            "ready": all_ready,
            "checks": checks,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        status_code=200 if all_ready else 503,
    )


def check_git_availability() -> bool:
    """Check if git is available"""
    try:
        Git().version()
        return True
    except (GitCommandError, GitCommandNotFound):
        return False
