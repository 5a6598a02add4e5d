"""
Slack Events API endpoint.
"""

import json
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse

from qa_relay.config import Settings, get_settings
from qa_relay.security import verify_slack_signature
from qa_relay.services.event_dispatcher import EventDispatcher
from qa_relay.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/slack", tags=["slack"])


def get_dispatcher(request: Request) -> EventDispatcher:
    """Return the dispatcher built during application startup."""
    return request.app.state.dispatcher


@router.post("/events", response_class=PlainTextResponse)
async def handle_slack_events(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
    x_slack_signature: Optional[str] = Header(None),
    x_slack_request_timestamp: Optional[str] = Header(None),
) -> PlainTextResponse:
    """
    Receive Slack Events API deliveries.

    This endpoint:
    1. Answers the ``url_verification`` handshake with its challenge
    2. Validates the request signature and timestamp
    3. Returns 200 "ok" immediately
    4. Processes the event in a background task once the response is sent

    Raises:
        HTTPException: 400 on an unparseable body, 500 when secrets are not
            configured, 401 on an invalid signature
    """
    body = await request.body()

    try:
        payload: Any = json.loads(body)
    except ValueError:
        logger.warning("Rejected Slack delivery with invalid JSON")
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    # The handshake is answered before any credential check.
    if isinstance(payload, dict) and payload.get("type") == "url_verification":
        logger.info("Answering Slack url_verification handshake")
        return PlainTextResponse(str(payload.get("challenge") or ""))

    missing = settings.missing_secrets()
    if missing:
        logger.error(f"Missing required configuration: {', '.join(missing)}")
        raise HTTPException(status_code=500, detail="Missing required environment variables")

    if not verify_slack_signature(
        body,
        x_slack_signature,
        x_slack_request_timestamp,
        settings.slack_signing_secret,
        max_age_seconds=settings.signature_max_age_seconds,
    ):
        logger.warning("Invalid Slack signature received")
        raise HTTPException(status_code=401, detail="Invalid signature")

    if not isinstance(payload, dict):
        logger.info("Ignoring Slack delivery whose body is not a JSON object")
        return PlainTextResponse("ok")

    # Acknowledge first; Slack retries slow deliveries.
    background_tasks.add_task(dispatcher.dispatch, payload)
    return PlainTextResponse("ok")
