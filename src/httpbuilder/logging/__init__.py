"""Structured logging utilities."""

from .setup import add_app_context, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "add_app_context",
]
