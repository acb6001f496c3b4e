# Assumptions:
# - Abstract transport port for dependency inversion
# - A handle represents one request/response exchange and is never reused
# - Failures surface as TransportError subclasses

from abc import ABC, abstractmethod
from typing import BinaryIO


class TransportHandle(ABC):
    """One open, stateful HTTP exchange"""

    @property
    @abstractmethod
    def url(self) -> str:
        """URL the handle was opened against"""
        pass

    @abstractmethod
    def set_method(self, method: str) -> None:
        """
        Set the request method

        Raises:
            ProtocolError: If the method is unknown or the request is committed
        """
        pass

    @abstractmethod
    def set_connect_timeout(self, timeout_ms: int) -> None:
        """Set the connect timeout in milliseconds, 0 meaning no timeout"""
        pass

    @abstractmethod
    def set_use_cache(self, use_cache: bool) -> None:
        """Allow or forbid answering from a cache"""
        pass

    @abstractmethod
    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing earlier values with the same name"""
        pass

    @abstractmethod
    def add_header(self, name: str, value: str) -> None:
        """Add a header, keeping earlier values with the same name"""
        pass

    @abstractmethod
    def add_cache_control(self, directive: str) -> None:
        """Add a Cache-Control directive"""
        pass

    @abstractmethod
    def enable_output(self) -> None:
        """Allow a request body to be written"""
        pass

    @abstractmethod
    def open_output_stream(self) -> BinaryIO:
        """
        Open the request body stream

        Raises:
            ProtocolError: If output was not enabled or the request is committed
        """
        pass

    @abstractmethod
    def connect(self) -> None:
        """
        Commit the request and receive the status line and headers

        Raises:
            TransportIOError: If the exchange fails
        """
        pass

    @abstractmethod
    def get_status(self) -> int:
        """Response status code, connecting first if needed"""
        pass

    @abstractmethod
    def get_response_headers(self) -> list[tuple[str, str]]:
        """Response headers in wire order, connecting first if needed"""
        pass

    @abstractmethod
    def get_input_stream(self) -> BinaryIO:
        """
        Response body for a successful status

        Raises:
            HttpStatusError: If the status is 400 or above
            TransportIOError: If the exchange fails
        """
        pass

    @abstractmethod
    def get_error_stream(self) -> BinaryIO | None:
        """Response body for an error status, None otherwise"""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the exchange; further calls are no-ops"""
        pass


class Transport(ABC):
    """Abstract HTTP transport port"""

    @abstractmethod
    def open(self, url: str) -> TransportHandle:
        """
        Open a handle for a URL without sending anything

        Raises:
            InvalidURLError: If the URL is malformed
            ConnectionOpenError: If no handle can be created
        """
        pass
