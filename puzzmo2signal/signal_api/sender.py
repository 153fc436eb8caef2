"""Outbound delivery to the signal-cli REST API.

One ``POST /v2/send`` per webhook. No retry and no backoff: a failed
attempt surfaces as ``DeliveryError`` and the caller logs it.
"""

from __future__ import annotations

import logging

import httpx

from puzzmo2signal.config import Settings
from puzzmo2signal.models import OutboundMessage

logger = logging.getLogger(__name__)

_SEND_PATH = "/v2/send"


class DeliveryError(Exception):
    """Raised when the messaging API does not accept a message."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = "",
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


def normalize_api_url(api_url: str) -> str:
    """Prefix ``http://`` when the configured URL has no scheme.

    Plain HTTP is the default because signal-cli-rest-api usually runs on
    the local network next to this service.
    """
    if not api_url.startswith(("http://", "https://")):
        api_url = f"http://{api_url}"
    return api_url.rstrip("/")


class SignalSender:
    """Sends messages from the configured number to the configured group."""

    def __init__(self, settings: Settings) -> None:
        self._number = settings.signal_phone
        self._group_id = settings.signal_group_id
        self._url = normalize_api_url(settings.signal_api_url) + _SEND_PATH

    @property
    def url(self) -> str:
        return self._url

    def build_message(self, body: str) -> OutboundMessage:
        return OutboundMessage(
            number=self._number,
            message=body,
            recipients=[self._group_id],
        )

    async def send(self, body: str) -> None:
        """Deliver ``body`` to the group. Raises DeliveryError on failure."""
        payload = self.build_message(body).model_dump()
        headers = {"Content-Type": "application/json"}
        logger.info("Making request to: %s", self._url)

        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(self._url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Error sending Signal message: {exc}") from exc

        if resp.status_code != 200:
            raise DeliveryError(
                f"Signal API returned non-200 status: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
