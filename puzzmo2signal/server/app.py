"""FastAPI application serving the single secret webhook route."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from puzzmo2signal.config import Settings
from puzzmo2signal.secret_path.store import SecretPathStore
from puzzmo2signal.signal_api.sender import SignalSender
from puzzmo2signal.webhook.handler import WebhookHandler

logger = logging.getLogger(__name__)

# All methods are routed to the handler so it can answer 405 itself.
_ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    settings = Settings.from_env()
    store = SecretPathStore(os.environ.get("PUZZMO2SIGNAL_CONFIG_DIR") or None)
    webhook_path = store.get_or_create_path()
    logger.info("Listening on: %s", settings.public_url(webhook_path))
    return create_app(settings, webhook_path)


def create_app(
    settings: Settings,
    webhook_path: str,
    sender: SignalSender | None = None,
) -> FastAPI:
    """Create the app with one route at ``/<webhook_path>``."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    handler = WebhookHandler(
        sender or SignalSender(settings),
        preserve_markdown=settings.preserve_markdown,
    )
    app.add_api_route(
        f"/{webhook_path}",
        handler.handle,
        methods=_ROUTE_METHODS,
        include_in_schema=False,
    )
    app.state.webhook_handler = handler
    return app
