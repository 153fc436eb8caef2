"""Click CLI for the puzzmo2signal relay server."""

from __future__ import annotations

import logging

import click
import uvicorn

from puzzmo2signal.config import ConfigError, Settings
from puzzmo2signal.secret_path.store import SecretPathError, SecretPathStore
from puzzmo2signal.server.app import create_app

logger = logging.getLogger(__name__)

_LOG_LEVELS = ["debug", "info", "warning", "error"]
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _load_settings(**overrides: object) -> Settings:
    try:
        return Settings.from_env(**overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _webhook_path(store: SecretPathStore) -> str:
    try:
        return store.get_or_create_path()
    except SecretPathError as exc:
        raise click.ClickException(f"Failed to setup webhook path: {exc}") from exc


config_dir_option = click.option(
    "--config-dir",
    default=None,
    envvar="PUZZMO2SIGNAL_CONFIG_DIR",
    help="Directory holding webhook_config.json (default: per-user config dir).",
)


@click.group()
def cli() -> None:
    """Relay Puzzmo webhooks to a Signal group."""


@cli.command()
@click.option(
    "--preserve-markdown", is_flag=True, help="Preserve markdown in the message.",
)
@click.option("--host", default="127.0.0.1", show_default=True, help="Listen address.")
@click.option("--port", default=8080, show_default=True, help="Listen port.")
@config_dir_option
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS),
    default="info",
    show_default=True,
)
def serve(
    preserve_markdown: bool,
    host: str,
    port: int,
    config_dir: str | None,
    log_level: str,
) -> None:
    """Serve the webhook route behind the tunnel."""
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT)
    settings = _load_settings(preserve_markdown=preserve_markdown)
    webhook_path = _webhook_path(SecretPathStore(config_dir))
    app = create_app(settings, webhook_path)

    logger.info("Server starting behind tunnel host %s", settings.ts_hostname)
    logger.info("Listening on: %s", settings.public_url(webhook_path))
    uvicorn.run(app, host=host, port=port, log_level=log_level)


@cli.group("path")
def path_group() -> None:
    """Manage the secret webhook path."""


@path_group.command("show")
@config_dir_option
def path_show(config_dir: str | None) -> None:
    """Print the public webhook URL, creating the path if needed."""
    settings = _load_settings()
    webhook_path = _webhook_path(SecretPathStore(config_dir))
    click.echo(settings.public_url(webhook_path))


@path_group.command("reset")
@config_dir_option
def path_reset(config_dir: str | None) -> None:
    """Delete the persisted path; a new one is generated on next start."""
    store = SecretPathStore(config_dir)
    try:
        removed = store.reset()
    except SecretPathError as exc:
        raise click.ClickException(str(exc)) from exc
    if removed:
        click.echo(f"Removed {store.config_file}")
    else:
        click.echo(f"No webhook path stored at {store.config_file}")


if __name__ == "__main__":
    cli()
