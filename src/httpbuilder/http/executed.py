# Assumptions:
# - Owns exactly one transport handle until close()
# - The body is buffered on first read so it can be read again
# - Read failures are reported as None, reads after close fail fast
# - Text decoding follows the response charset, UTF-8 otherwise

import io
from collections.abc import Callable
from typing import BinaryIO, TextIO

import structlog

from ..errors import RequestClosedError, TransportError
from ..imaging.port import DecodedImage, ImageDecoder
from ..imaging.signature_decoder import SignatureImageDecoder
from ..transport.port import TransportHandle

logger = structlog.get_logger(__name__)

DEFAULT_TEXT_ENCODING = "utf-8"


def _charset_from_headers(headers: list[tuple[str, str]]) -> str | None:
    for name, value in headers:
        if name.lower() != "content-type":
            continue
        for part in value.split(";")[1:]:
            key, _, charset = part.strip().partition("=")
            if key.lower() == "charset" and charset:
                return charset.strip("\"' ")
    return None


class ExecutedRequest:
    """Response access for one executed request"""

    def __init__(
        self,
        handle: TransportHandle,
        image_decoder: ImageDecoder | None = None,
        on_close: Callable[[], None] | None = None,
    ):
        self._handle: TransportHandle | None = handle
        self._url = handle.url
        self._image_decoder = image_decoder or SignatureImageDecoder()
        self._on_close = on_close
        self._content: bytes | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def handle(self) -> TransportHandle | None:
        """Underlying transport handle, None once closed"""
        return self._handle

    @property
    def closed(self) -> bool:
        return self._handle is None

    def _require_handle(self) -> TransportHandle:
        if self._handle is None:
            raise RequestClosedError(self._url)
        return self._handle

    def status_code(self) -> int | None:
        handle = self._require_handle()
        try:
            return handle.get_status()
        except TransportError as e:
            logger.warning("Failed to read response status", url=self._url, error=str(e))
            return None

    def response_headers(self) -> list[tuple[str, str]]:
        handle = self._require_handle()
        try:
            return handle.get_response_headers()
        except TransportError as e:
            logger.warning("Failed to read response headers", url=self._url, error=str(e))
            return []

    def _live_stream(self, handle: TransportHandle) -> BinaryIO | None:
        try:
            return handle.get_input_stream()
        except TransportError as e:
            logger.debug("Success stream unavailable, using error stream", url=self._url, error=str(e))

        try:
            stream = handle.get_error_stream()
        except TransportError as e:
            logger.warning("Failed to open response stream", url=self._url, error=str(e))
            return None
        if stream is None:
            logger.warning("No response stream available", url=self._url)
        return stream

    def raw_stream(self) -> BinaryIO | None:
        """
        Response body stream

        Falls back to the error stream when the success stream is unavailable
        (e.g. a 4xx/5xx status), so some body is readable whenever one exists.
        The live body can be consumed once; after content(), text() or image()
        have buffered it, each call returns a fresh stream over the buffer.

        Returns:
            Binary stream, or None if neither stream can be opened

        Raises:
            RequestClosedError: If the request was closed
        """
        handle = self._require_handle()
        if self._content is not None:
            return io.BytesIO(self._content)
        return self._live_stream(handle)

    def content(self) -> bytes | None:
        """Read and buffer the whole body; None on read failure"""
        handle = self._require_handle()
        if self._content is None:
            stream = self._live_stream(handle)
            if stream is None:
                return None
            try:
                self._content = stream.read()
            except (TransportError, OSError, ValueError) as e:
                logger.warning("Failed to read response body", url=self._url, error=str(e))
                return None
        return self._content

    def reader(self, encoding: str | None = None, newline: str | None = None) -> TextIO | None:
        """Text reader over the buffered body"""
        content = self.content()
        if content is None:
            return None
        encoding = encoding or _charset_from_headers(self.response_headers()) or DEFAULT_TEXT_ENCODING
        return io.TextIOWrapper(io.BytesIO(content), encoding=encoding, errors="replace", newline=newline)

    def text(self, keep_line_breaks: bool = False) -> str | None:
        """
        Read the whole body as text

        Args:
            keep_line_breaks: Return the body with its line separators as sent;
                by default lines are concatenated without them

        Returns:
            Body text, or None on read failure
        """
        try:
            reader = self.reader(newline="" if keep_line_breaks else None)
            if reader is None:
                return None
            with reader:
                if keep_line_breaks:
                    return reader.read()
                return "".join(line.rstrip("\r\n") for line in reader)
        except (OSError, ValueError, LookupError) as e:
            logger.warning("Failed to read response text", url=self._url, error=str(e))
            return None

    def image(self) -> DecodedImage | None:
        """Decode the buffered body with the configured image decoder"""
        content = self.content()
        if content is None:
            return None
        with io.BytesIO(content) as stream:
            return self._image_decoder.decode(stream)

    def close(self) -> None:
        """Disconnect the handle; later calls are no-ops"""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.disconnect()
        finally:
            if self._on_close is not None:
                self._on_close()
            logger.debug("Request closed", url=self._url)

    def __enter__(self) -> "ExecutedRequest":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<ExecutedRequest {self._url} ({state})>"
