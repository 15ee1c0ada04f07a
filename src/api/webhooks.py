"""
GitHub webhook endpoint
"""

import structlog
from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse

from src.models.responses import ErrorResponse
from src.services.event_router import EventRouter
from src.services.shared_services import get_event_router
from src.utils.webhook_validator import extract_github_event_type

router = APIRouter()
logger = structlog.get_logger()


@router.post("/")
async def github_webhook(
    request: Request,
    event_router: EventRouter = Depends(get_event_router),
) -> JSONResponse:
    """
    Receive a GitHub webhook delivery and run the matching review workflow
    """
    event_type = extract_github_event_type(request.headers)
    delivery_id = request.headers.get("X-GitHub-Delivery", "unknown")

    logger.info("Received GitHub webhook", event_type=event_type, delivery_id=delivery_id)

    try:
        body = await request.body()
    except Exception as e:
        logger.error("Failed to read webhook body", delivery_id=delivery_id, error=str(e))
        response = ErrorResponse(e, 500, "Failed to read the request's body")
    else:
        signature = request.headers.get("X-Hub-Signature", "")
        try:
            response = await event_router.dispatch(body, signature, event_type)
        except Exception as e:
            logger.error(
                "Webhook processing failed",
                event_type=event_type,
                delivery_id=delivery_id,
                error=str(e),
            )
            response = ErrorResponse(e, 500, "Internal processing error")

    logger.info(
        "Webhook event handled",
        event_type=event_type,
        delivery_id=delivery_id,
        status_code=response.status_code,
    )

    return JSONResponse(content=response.to_content(), status_code=response.status_code)
