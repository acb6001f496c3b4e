# Assumptions:
# - httpx.Client is the underlying HTTP primitive
# - Handles are lazy: nothing is sent until connect() or the first read
# - Only the connect phase has a timeout

import io

import httpx
import structlog

from ..errors import ConnectionOpenError, HttpStatusError, InvalidURLError, ProtocolError, TransportIOError
from .port import Transport, TransportHandle

logger = structlog.get_logger(__name__)

ALLOWED_METHODS = ("GET", "POST", "HEAD", "OPTIONS", "PUT", "DELETE", "TRACE", "PATCH")
ALLOWED_SCHEMES = ("http", "https")


class _ResponseBodyReader(io.RawIOBase):
    """Raw stream over a streamed httpx response body"""

    def __init__(self, response: httpx.Response):
        self._response = response
        self._chunks = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
            except (httpx.HTTPError, httpx.StreamError) as e:
                raise TransportIOError(str(self._response.url), f"Failed to read response body: {e}") from e

        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


class _RequestBodyWriter(io.BytesIO):
    """Buffers the request body and hands it to the handle on close"""

    def __init__(self, handle: "HttpxHandle"):
        super().__init__()
        self._handle = handle

    def close(self) -> None:
        if not self.closed:
            self._handle._body = self.getvalue()
        super().close()


class HttpxHandle(TransportHandle):
    """Single request/response exchange over an httpx.Client"""

    def __init__(self, client: httpx.Client, url: str):
        self._client = client
        self._url = url
        self._method = "GET"
        self._headers: list[tuple[str, str]] = []
        self._cache_directives: list[str] = []
        self._use_cache = True
        self._timeout_ms = 0
        self._output_enabled = False
        self._body: bytes | None = None
        self._response: httpx.Response | None = None
        self._body_stream: io.BufferedReader | None = None
        self._disconnected = False

    @property
    def url(self) -> str:
        return self._url

    @property
    def use_cache(self) -> bool:
        """Cache hint; httpx keeps no local cache, so nothing is ever served from one"""
        return self._use_cache

    def _check_configurable(self) -> None:
        if self._disconnected:
            raise ProtocolError(self._url, "Handle is disconnected")
        if self._response is not None:
            raise ProtocolError(self._url, "Already connected")

    def set_method(self, method: str) -> None:
        self._check_configurable()
        if method not in ALLOWED_METHODS:
            raise ProtocolError(self._url, f"Invalid HTTP method: {method}")
        self._method = method

    def set_connect_timeout(self, timeout_ms: int) -> None:
        self._check_configurable()
        if timeout_ms < 0:
            raise ValueError(f"timeout can not be negative: {timeout_ms}")
        self._timeout_ms = timeout_ms

    def set_use_cache(self, use_cache: bool) -> None:
        self._check_configurable()
        self._use_cache = use_cache

    def set_header(self, name: str, value: str) -> None:
        self._check_configurable()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != name.lower()]
        self._headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        self._check_configurable()
        self._headers.append((name, value))

    def add_cache_control(self, directive: str) -> None:
        self._check_configurable()
        self._cache_directives.append(directive)

    def enable_output(self) -> None:
        self._check_configurable()
        self._output_enabled = True

    def open_output_stream(self) -> _RequestBodyWriter:
        self._check_configurable()
        if not self._output_enabled:
            raise ProtocolError(self._url, "Output not enabled, call enable_output() first")
        return _RequestBodyWriter(self)

    def _cache_control(self) -> str | None:
        return ", ".join(self._cache_directives) if self._cache_directives else None

    def _timeout(self) -> httpx.Timeout:
        connect = self._timeout_ms / 1000 if self._timeout_ms else None
        return httpx.Timeout(None, connect=connect)

    def connect(self) -> None:
        if self._response is not None:
            return
        if self._disconnected:
            raise ProtocolError(self._url, "Handle is disconnected")

        headers = list(self._headers)
        cache_control = self._cache_control()
        if cache_control:
            headers.append(("Cache-Control", cache_control))

        try:
            request = self._client.build_request(
                self._method,
                self._url,
                headers=headers,
                content=self._body,
                timeout=self._timeout(),
            )
            self._response = self._client.send(request, stream=True)
        except httpx.InvalidURL as e:
            raise InvalidURLError(self._url, f"Malformed URL: {e}") from e
        except httpx.TimeoutException as e:
            raise TransportIOError(self._url, f"Timeout after {self._timeout_ms}ms: {e}") from e
        except httpx.RequestError as e:
            raise TransportIOError(self._url, f"Request failed: {e}") from e

        logger.debug(
            "HTTP response received",
            method=self._method,
            url=self._url,
            status_code=self._response.status_code,
        )

    def get_status(self) -> int:
        self.connect()
        return self._response.status_code

    def get_response_headers(self) -> list[tuple[str, str]]:
        self.connect()
        return list(self._response.headers.multi_items())

    def _open_body(self) -> io.BufferedReader:
        if self._body_stream is None:
            self._body_stream = io.BufferedReader(_ResponseBodyReader(self._response))
        return self._body_stream

    def get_input_stream(self) -> io.BufferedReader:
        self.connect()
        if self._response.status_code >= 400:
            raise HttpStatusError(self._url, self._response.status_code)
        return self._open_body()

    def get_error_stream(self) -> io.BufferedReader | None:
        try:
            self.connect()
        except (ProtocolError, TransportIOError):
            return None
        if self._response.status_code < 400:
            return None
        return self._open_body()

    def disconnect(self) -> None:
        if self._disconnected:
            return
        self._disconnected = True
        if self._body_stream is not None:
            self._body_stream.close()
        if self._response is not None:
            self._response.close()


class HttpxTransport(Transport):
    """Transport backed by httpx"""

    def __init__(self, client: httpx.Client | None = None, follow_redirects: bool = True, **client_kwargs):
        self._owns_client = client is None
        self._client = client or httpx.Client(follow_redirects=follow_redirects, **client_kwargs)
        self._closed = False

    def open(self, url: str) -> HttpxHandle:
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidURLError(url, f"Malformed URL: {e}") from e

        if parsed.scheme not in ALLOWED_SCHEMES or not parsed.host:
            raise InvalidURLError(url, "Only absolute http(s) URLs are supported")
        if self._closed:
            raise ConnectionOpenError(url, "Transport is closed")

        return HttpxHandle(self._client, url)

    def close(self) -> None:
        """Close the client if this transport created it"""
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
