"""
Declarative HTTP request builder.

This library provides:
- A fluent builder and an immutable request description
- Retrying execution with typed outcomes
- Response access as bytes, text or decoded images
- Pluggable transport and image codec ports
"""

from .errors import (
    ConnectionOpenError,
    HttpBuilderError,
    HttpStatusError,
    InvalidURLError,
    ProtocolError,
    RequestClosedError,
    RequestFailedError,
    TransportError,
    TransportIOError,
)
from .logging import setup_logging
from .http import (
    ExecutedRequest,
    Exhausted,
    KeyValuePair,
    OpenFailed,
    RequestBuilder,
    RequestMethod,
    RequestOutcome,
    RequestSpec,
    Success,
    execute,
)

__version__ = "1.0.0"

__all__ = [
    "RequestBuilder",
    "RequestSpec",
    "RequestMethod",
    "KeyValuePair",
    "ExecutedRequest",
    "RequestOutcome",
    "Success",
    "Exhausted",
    "OpenFailed",
    "execute",
    "HttpBuilderError",
    "TransportError",
    "InvalidURLError",
    "ConnectionOpenError",
    "ProtocolError",
    "TransportIOError",
    "HttpStatusError",
    "RequestClosedError",
    "RequestFailedError",
    "setup_logging",
]
