"""InboundGateway: Messenger events to conversation turns."""

from typing import Protocol

from ..dialogue import IConversationDriver
from ..errors import DeliveryError, NestbotError, TurnError
from ..logging_config import get_logger
from ..sessions import ISessionStore
from ..tracker import ITracker
from .client import IMessengerClient
from .schemas import MessagingEvent, WebhookPayload

logger = get_logger(__name__)

ATTACHMENT_REPLY = "Sorry I can only process text messages for now."


class IInboundGateway(Protocol):
    """Turns webhook payloads into conversation turns."""

    async def handle_payload(self, payload: WebhookPayload) -> None:
        """Process every messaging event in the payload. Never raises."""
        ...


class InboundGateway:
    """Routes Messenger events to sessions and the ConversationDriver."""

    def __init__(
        self,
        sessions: ISessionStore,
        driver: IConversationDriver,
        messenger: IMessengerClient,
        tracker: ITracker,
    ):
        self._sessions = sessions
        self._driver = driver
        self._messenger = messenger
        self._tracker = tracker

    async def handle_payload(self, payload: WebhookPayload) -> None:
        """Process every messaging event in the payload. Never raises."""
        if payload.object != "page":
            logger.info("Ignoring webhook for object %s", payload.object)
            return

        for entry in payload.entry:
            for event in entry.messaging:
                try:
                    await self.handle_event(event)
                except NestbotError as e:
                    # e.g. the session was dropped by a reset mid-turn
                    logger.error(
                        "Could not handle event from %s: %s",
                        event.sender.id,
                        e,
                        exc_info=True,
                    )

    async def handle_event(self, event: MessagingEvent) -> None:
        message = event.message
        if message is None or message.is_echo:
            logger.debug("Received event %s", event.model_dump_json())
            return

        sender = event.sender.id
        is_new = not self._sessions.has_user(sender)
        session_id = self._sessions.resolve_or_create(sender)
        if is_new:
            await self._tracker.track(
                "session_created",
                "inbound_gateway",
                {"session_id": session_id, "user_id": sender},
            )

        if message.attachments:
            await self._reply_to_attachment(sender, session_id)
        elif message.text:
            try:
                await self._driver.run_turn(session_id, message.text)
                logger.info("Waiting for next user messages", extra={"context": {"session_id": session_id}})
            except TurnError as e:
                logger.error(
                    "Got an error from the dialogue engine: %s",
                    e.cause,
                    exc_info=e.cause,
                    extra={"context": {"session_id": session_id}},
                )

    async def _reply_to_attachment(self, sender: str, session_id: str) -> None:
        await self._tracker.track(
            "attachment_rejected",
            "inbound_gateway",
            {"session_id": session_id, "user_id": sender},
        )
        try:
            await self._messenger.send_text(sender, ATTACHMENT_REPLY)
        except DeliveryError as e:
            logger.error("Could not reply to attachment from %s: %s", sender, e)
