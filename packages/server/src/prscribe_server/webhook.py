import json
import logging

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse

from prscribe_server.security import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def health_check():
    return {"status": "ok", "message": "PR review bot is running"}


@router.post("/webhook")
async def github_webhook(request: Request, background_tasks: BackgroundTasks):
    """
    Receive GitHub webhooks.

    Only ``pull_request`` events with action ``opened`` start a review; every
    other delivery is acknowledged with 200 so GitHub does not redeliver it.
    The review itself runs after the response has been sent.
    """
    body = await request.body()
    secret = request.app.state.webhook_secret
    if secret and not verify_signature(body, request.headers.get("X-Hub-Signature-256"), secret):
        logger.warning("Rejected webhook delivery %s: bad signature", request.headers.get("X-GitHub-Delivery"))
        return JSONResponse(status_code=401, content={"status": "error", "reason": "invalid signature"})

    event_type = request.headers.get("X-GitHub-Event", "")
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        return {"status": "ignored", "reason": "body is not valid JSON"}

    try:
        return await request.app.state.pipeline.handle_event(
            event_type, payload, schedule=background_tasks.add_task
        )
    except Exception:
        logger.exception("Error processing webhook")
        return JSONResponse(status_code=500, content={"status": "error", "reason": "internal server error"})
