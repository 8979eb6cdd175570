"""GitHub webhook handling: signature check, payload parsing and event routing."""

import json

from fastapi import HTTPException

from app.core.config import settings
from app.core.logging import get_logger
from app.services.deploy_checklist.handlers import (
    handle_issue_comment_edited,
    handle_pull_request,
)
from app.services.github.security import verify_signature

logger = get_logger(__name__)


async def handle_github_webhook(
    event_type: str, raw_body: bytes, signature_header: str
) -> dict:
    """
    Process a GitHub webhook: verify, parse and route by event type.

    - pull_request: schedules a checklist analysis.
    - issue_comment: re-evaluates the merge gate after checkbox edits.
    - ping and other events: acknowledged and ignored.

    Args:
        event_type: The X-GitHub-Event header value (e.g. "pull_request").
        raw_body: The raw body bytes for signature verification.
        signature_header: The X-Hub-Signature-256 header.

    Returns:
        A dict to be returned as the JSON response.
    """
    # 1. Verify Signature
    if not verify_signature(raw_body, settings.GITHUB_WEBHOOK_SECRET, signature_header):
        raise HTTPException(status_code=403, detail="Invalid signature")

    # 2. Parse Payload
    try:
        payload = json.loads(raw_body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    if event_type == "ping":
        return {"message": "pong"}

    try:
        if event_type == "pull_request":
            logger.info("Processing pull_request event: %s", payload.get("action"))
            return await handle_pull_request(payload)

        if event_type == "issue_comment":
            return await handle_issue_comment_edited(payload)
    except Exception as e:
        logger.error("Handling %s event failed: %s", event_type, e, exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Webhook handling failed: {str(e)}"
        ) from e

    logger.info("GitHub webhook received: %s", event_type)
    return {"message": "Event ignored", "event": event_type}
