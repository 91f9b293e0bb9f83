"""Messenger webhook routes."""

import json

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from ...app import Application
from ...errors import SignatureError
from ...logging_config import get_logger
from ...messenger import WebhookPayload, verify_challenge, verify_signature

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature"


def create_webhook_router(app: Application) -> APIRouter:
    """Create webhook router."""
    router = APIRouter(tags=["webhook"])

    @router.get("/webhook", response_class=PlainTextResponse)
    async def verify_subscription(
        hub_mode: str | None = Query(None, alias="hub.mode"),
        hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
        hub_challenge: str | None = Query(None, alias="hub.challenge"),
    ) -> str:
        """Echo the subscription challenge when the verify token matches."""
        challenge = verify_challenge(
            hub_mode, hub_verify_token, hub_challenge, app.settings.verify_token
        )
        if challenge is None:
            logger.warning("Rejected webhook subscription, mode=%s", hub_mode)
            raise HTTPException(status_code=400, detail="Invalid verification request")
        return challenge

    @router.post("/webhook", response_class=PlainTextResponse)
    async def receive_events(request: Request, background_tasks: BackgroundTasks) -> str:
        """Acknowledge Messenger events and process them in the background."""
        body = await request.body()

        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning("Couldn't validate the signature: header missing")
        else:
            try:
                verify_signature(body, signature, app.settings.app_secret)
            except SignatureError as e:
                logger.error("Rejected webhook call: %s", e)
                raise HTTPException(status_code=403, detail=str(e))

        try:
            data = json.loads(body)
        except ValueError as e:
            logger.error("Malformed webhook payload: %s", e)
            raise HTTPException(status_code=400, detail="Malformed payload")

        try:
            payload = WebhookPayload.model_validate(data)
        except ValidationError as e:
            # Acknowledged anyway, Messenger keeps retrying anything but 200
            logger.warning("Ignoring webhook payload of unexpected shape: %s", e)
            return "OK"

        background_tasks.add_task(app.inbound.handle_payload, payload)
        return "OK"

    return router
