"""Webhook ingestion handler.

Handling runs in two sequential phases inside the same request task:

1. Acknowledge: method check, body read, ``200 Webhook received``.
2. Relay: parse, normalize, deliver. Runs as a Starlette background
   task attached to the acknowledgment, i.e. after the response has been
   sent. Its failures are logged and never reach the webhook caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError
from starlette.background import BackgroundTask
from starlette.requests import ClientDisconnect, Request
from starlette.responses import PlainTextResponse, Response

from puzzmo2signal.models import RequestState, WebhookPayload
from puzzmo2signal.normalizer.markdown import NormalizationError, to_plain_text
from puzzmo2signal.signal_api.sender import DeliveryError, SignalSender

logger = logging.getLogger(__name__)

ACK_TEXT = "Webhook received"


class WebhookHandler:
    """Receives webhook deliveries and relays them to the messaging API."""

    def __init__(
        self,
        sender: SignalSender,
        preserve_markdown: bool = False,
        normalizer: Callable[[str], str] = to_plain_text,
    ) -> None:
        self._sender = sender
        self._preserve_markdown = preserve_markdown
        self._normalizer = normalizer

    async def handle(self, request: Request) -> Response:
        """Acknowledge phase; schedules :meth:`relay` after the response."""
        if request.method != "POST":
            logger.info(
                "Rejected %s request (%s)",
                request.method, RequestState.METHOD_REJECTED.value,
            )
            return PlainTextResponse("Method not allowed", status_code=405)

        try:
            body = await request.body()
        except ClientDisconnect:
            logger.warning(
                "Error reading request body (%s)",
                RequestState.BODY_READ_FAILED.value,
            )
            return PlainTextResponse("Error reading request body", status_code=400)

        logger.debug("Webhook %s", RequestState.ACKNOWLEDGED.value)
        return PlainTextResponse(
            ACK_TEXT, status_code=200, background=BackgroundTask(self.relay, body),
        )

    async def relay(self, body: bytes) -> RequestState:
        """Relay phase: returns the terminal state of the request."""
        try:
            payload = WebhookPayload.model_validate_json(body)
        except ValidationError:
            logger.warning("Invalid webhook format")
            return RequestState.PARSE_FAILED

        message = payload.content
        logger.info("Message received: %s", message)

        final_message = message
        if not self._preserve_markdown:
            try:
                final_message = self._normalizer(message)
            except NormalizationError as exc:
                logger.error("Error extracting plaintext message: %s", exc)
                return RequestState.NORMALIZE_FAILED
            if not final_message:
                logger.error("Plaintext message is empty, skipping delivery")
                return RequestState.NORMALIZE_FAILED

        try:
            await self._sender.send(final_message)
        except DeliveryError as exc:
            if exc.status_code is not None:
                logger.error(
                    "Signal API returned non-200 status: %d, response: %s",
                    exc.status_code, exc.body,
                )
            else:
                logger.error("%s", exc)
            return RequestState.DELIVERY_FAILED

        logger.info("Message delivered to Signal group")
        return RequestState.DELIVERED
