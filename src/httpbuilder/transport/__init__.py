"""HTTP transport port and the httpx-backed adapter."""

from .httpx_transport import HttpxHandle, HttpxTransport
from .port import Transport, TransportHandle

__all__ = [
    "Transport",
    "TransportHandle",
    "HttpxTransport",
    "HttpxHandle",
]
