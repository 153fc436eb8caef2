"""Shared Pydantic data models for puzzmo2signal."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictStr

# --- Enums ---


class RequestState(str, Enum):
    """Per-request webhook handling states.

    ``received`` leads to ``method_rejected``, ``body_read_failed`` or
    ``acknowledged``. An acknowledged request ends in one of
    ``parse_failed``, ``normalize_failed``, ``delivered`` or
    ``delivery_failed``.
    """

    RECEIVED = "received"
    METHOD_REJECTED = "method_rejected"
    BODY_READ_FAILED = "body_read_failed"
    ACKNOWLEDGED = "acknowledged"
    PARSE_FAILED = "parse_failed"
    NORMALIZE_FAILED = "normalize_failed"
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"


# --- Persisted state ---


class WebhookConfig(BaseModel):
    """On-disk record holding the secret webhook path."""

    path: StrictStr = Field(min_length=1)


# --- Webhook Models ---


class WebhookPayload(BaseModel):
    """Discord-style webhook body; only ``content`` is interpreted."""

    content: StrictStr = Field(min_length=1)


class OutboundMessage(BaseModel):
    """Body of a signal-cli REST API ``/v2/send`` request."""

    model_config = ConfigDict(frozen=True)

    number: str
    message: str
    recipients: list[str]
