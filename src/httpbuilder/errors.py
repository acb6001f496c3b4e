# Assumptions:
# - Transport failures are split into open, protocol and I/O errors
# - Protocol and I/O errors are retryable, open errors are not
# - Outcome failures keep the original cause attached


class HttpBuilderError(Exception):
    """Base exception for the request builder"""

    pass


class TransportError(HttpBuilderError):
    """Raised by a transport or one of its handles"""

    retryable = True

    def __init__(self, url: str | None, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason} ({url})" if url else reason)


class InvalidURLError(TransportError):
    """Raised when a URL cannot be parsed into an absolute http(s) URL"""

    retryable = False


class ConnectionOpenError(TransportError):
    """Raised when the transport cannot open a handle for a URL"""

    retryable = False


class ProtocolError(TransportError):
    """Raised when a handle is configured in an invalid state or order"""

    pass


class TransportIOError(TransportError):
    """Raised when sending the request or reading the response fails"""

    pass


class HttpStatusError(TransportIOError):
    """Raised when the success stream is requested for an error status"""

    def __init__(self, url: str | None, status_code: int):
        self.status_code = status_code
        super().__init__(url, f"HTTP {status_code}")


class RequestClosedError(HttpBuilderError):
    """Raised when an executed request is read after it was closed"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Request to {url} is closed")


class RequestFailedError(HttpBuilderError):
    """Raised by unwrap() on an outcome that holds no request"""

    def __init__(self, url: str, attempts: int, cause: Exception | None):
        self.url = url
        self.attempts = attempts
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Request to {url} failed after {attempts} attempt(s){detail}")
