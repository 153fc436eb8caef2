"""Secret webhook path store.

The webhook route is ``/<path>`` where ``path`` is 32 random bytes,
hex-encoded. The value is generated on first run and persisted as
``{"path": "..."}`` in the per-user configuration directory, so the
public URL stays stable across restarts until the file is deleted.
"""

from __future__ import annotations

import json
import logging
import os
import secrets
from pathlib import Path

import click
from pydantic import ValidationError

from puzzmo2signal.models import WebhookConfig

logger = logging.getLogger(__name__)

APP_NAME = "puzzmo2signal"
CONFIG_FILENAME = "webhook_config.json"

_PATH_BYTES = 32


class SecretPathError(Exception):
    """Raised when the secret path cannot be resolved or persisted."""


def generate_secure_path() -> str:
    """Return 32 bytes from a CSPRNG as 64 lowercase hex characters."""
    return secrets.token_hex(_PATH_BYTES)


def default_config_dir() -> Path:
    """Per-user configuration directory (honors ``XDG_CONFIG_HOME``)."""
    return Path(click.get_app_dir(APP_NAME))


class SecretPathStore:
    """Persists the single secret path used as the webhook URL suffix."""

    def __init__(self, config_dir: Path | str | None = None) -> None:
        self.config_dir = (
            Path(config_dir) if config_dir is not None else default_config_dir()
        )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def load(self) -> str | None:
        """Return the persisted path, or None if absent or malformed."""
        try:
            data = self.config_file.read_bytes()
        except OSError:
            return None
        try:
            return WebhookConfig.model_validate_json(data).path
        except ValidationError:
            logger.warning("Ignoring malformed webhook config at %s", self.config_file)
            return None

    def _make_config_dir(self) -> None:
        missing = [d for d in (self.config_dir, *self.config_dir.parents) if not d.exists()]
        for directory in reversed(missing):
            directory.mkdir(mode=0o700, exist_ok=True)

    def get_or_create_path(self) -> str:
        """Return the persisted path, generating and saving one if needed."""
        try:
            self._make_config_dir()
        except OSError as exc:
            raise SecretPathError(
                f"failed to create config directory: {exc}",
            ) from exc

        existing = self.load()
        if existing:
            return existing

        path = generate_secure_path()
        self._save(WebhookConfig(path=path))
        logger.info("Generated new webhook path in %s", self.config_file)
        return path

    def reset(self) -> bool:
        """Delete the persisted path. Returns True if a file was removed."""
        try:
            self.config_file.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise SecretPathError(
                f"failed to delete webhook config: {exc}",
            ) from exc
        return True

    def _save(self, config: WebhookConfig) -> None:
        data = json.dumps(config.model_dump(), separators=(",", ":"))
        try:
            fd = os.open(
                self.config_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600,
            )
            with os.fdopen(fd, "w") as f:
                f.write(data)
        except OSError as exc:
            raise SecretPathError(
                f"failed to write webhook config: {exc}",
            ) from exc
