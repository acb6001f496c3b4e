"""Configuration management utilities."""

from .settings import DEFAULT_CONNECTION_TIMEOUT_MS, RequestSettings, get_settings

__all__ = [
    "DEFAULT_CONNECTION_TIMEOUT_MS",
    "RequestSettings",
    "get_settings",
]
