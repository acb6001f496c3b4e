# Assumptions:
# - The library only emits events; the caller decides whether to configure output
# - Level and format default to RequestSettings (HTTPBUILDER_LOG_LEVEL / HTTPBUILDER_LOG_FORMAT)
# - httpx and httpcore stay at WARNING unless debugging

import logging
import sys

import structlog
from pythonjsonlogger import jsonlogger
from structlog.stdlib import LoggerFactory

from ..config.settings import RequestSettings, get_settings

LIBRARY_LOGGER = "httpbuilder"
TRANSPORT_LOGGERS = ("httpx", "httpcore")
LOG_FORMATS = ("json", "console")


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _renderer(format_type: str):
    if format_type == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    return handler


def setup_logging(
    app_name: str = LIBRARY_LOGGER,
    level: str | None = None,
    format_type: str | None = None,
    settings: RequestSettings | None = None,
) -> None:
    """
    Route request events (attempts, retries, read failures) to stdout

    Args:
        app_name: Name attached to every log entry
        level: Log level, defaults to settings.log_level
        format_type: "json" or "console", defaults to settings.log_format
        settings: Source of the defaults, get_settings() if omitted

    Raises:
        ValueError: On an unknown level or format
    """
    settings = settings or get_settings()
    level = level or settings.log_level
    format_type = format_type or settings.log_format
    if format_type not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {format_type}")
    numeric_level = _resolve_level(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_app_context(app_name),
            _renderer(format_type),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    if format_type == "json":
        # Plain stdlib records (httpx, httpcore) in the same JSON shape
        root_logger.handlers = [_json_handler()]
    else:
        root_logger.handlers = [logging.StreamHandler(sys.stdout)]

    logging.getLogger(LIBRARY_LOGGER).setLevel(numeric_level)
    transport_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


def add_app_context(app_name: str):
    """Add application context to all log entries"""

    def processor(logger, method_name, event_dict):
        event_dict["app"] = app_name
        return event_dict

    return processor


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name or LIBRARY_LOGGER)
