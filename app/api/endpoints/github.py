from fastapi import APIRouter, Header, Request

from app.services.github.webhook_service import handle_github_webhook

router = APIRouter()


@router.post("/webhook")
async def github_webhook(
    request: Request,
    x_github_event: str = Header(...),
    x_hub_signature_256: str = Header(default=""),
):
    """
    Handle GitHub webhook requests.

    Args:
        request: The incoming HTTP request.
        x_github_event: The GitHub event type (e.g. 'pull_request', 'issue_comment').
        x_hub_signature_256: HMAC SHA-256 signature of the raw body.

    Returns:
        A JSON acknowledgement. Analysis runs in the background.
    """
    raw_body = await request.body()
    return await handle_github_webhook(x_github_event, raw_body, x_hub_signature_256)
