"""Relay Puzzmo webhooks to a Signal group."""

__version__ = "0.1.0"
