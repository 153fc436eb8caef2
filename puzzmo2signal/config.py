"""Process configuration read once from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

REQUIRED_ENV_VARS = (
    "TS_HOSTNAME",
    "TS_AUTHKEY",
    "SIGNAL_PHONE",
    "SIGNAL_GROUP_ID",
    "SIGNAL_API_URL",
)

_TRUTHY = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Raised when required configuration is missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        names = ", ".join(missing)
        noun = "variable is" if len(missing) == 1 else "variables are"
        super().__init__(f"{names} environment {noun} required")


class Settings(BaseModel):
    """Immutable process-wide settings."""

    model_config = ConfigDict(frozen=True)

    ts_hostname: str
    ts_authkey: str
    signal_phone: str
    signal_group_id: str
    signal_api_url: str
    ts_cert_domain: str | None = None
    preserve_markdown: bool = False

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any,
    ) -> Settings:
        """Build settings from environment variables.

        Every missing required variable is reported in one ``ConfigError``.
        Keyword overrides (e.g. CLI flags) take precedence.
        """
        env = os.environ if environ is None else environ
        missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
        if missing:
            raise ConfigError(missing)

        values: dict[str, Any] = {
            name.lower(): env[name] for name in REQUIRED_ENV_VARS
        }
        values["ts_cert_domain"] = env.get("TS_CERT_DOMAIN") or None
        values["preserve_markdown"] = (
            env.get("PRESERVE_MARKDOWN", "").strip().lower() in _TRUTHY
        )
        values.update(overrides)
        return cls(**values)

    @property
    def public_domain(self) -> str:
        return self.ts_cert_domain or self.ts_hostname

    def public_url(self, webhook_path: str) -> str:
        """Externally reachable webhook URL behind the tunnel."""
        return f"https://{self.public_domain}/{webhook_path}"
