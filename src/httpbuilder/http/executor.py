# Assumptions:
# - Every attempt opens a fresh handle, a failed handle is never reused
# - Errors marked non-retryable end execution at once, on any attempt
# - Backoff is exponential and only applies when configured

import time

import structlog

from ..errors import TransportError
from ..imaging.port import ImageDecoder
from ..transport.httpx_transport import HttpxTransport
from ..transport.port import Transport, TransportHandle
from .executed import ExecutedRequest
from .outcomes import Exhausted, OpenFailed, RequestOutcome, Success
from .spec import FORCE_CACHE_DIRECTIVE, FORM_CONTENT_TYPE, RequestSpec

logger = structlog.get_logger(__name__)

BODY_ENCODING = "utf-8"


def _configure(handle: TransportHandle, spec: RequestSpec) -> None:
    """Apply configuration, write the body and commit the request"""
    handle.set_use_cache(spec.use_cache)
    handle.set_method(spec.method.value)
    handle.set_connect_timeout(spec.timeout_ms)
    for header in spec.headers:
        handle.add_header(header.name, header.value)

    if spec.uses_form_encoding():
        handle.set_header("Content-Type", FORM_CONTENT_TYPE)

    # Header changes are rejected once the body is written
    if spec.force_cache:
        handle.add_cache_control(FORCE_CACHE_DIRECTIVE)

    body = spec.effective_body()
    if body is not None:
        handle.enable_output()
        stream = handle.open_output_stream()
        try:
            stream.write(body.encode(BODY_ENCODING))
            stream.flush()
        finally:
            stream.close()

    handle.connect()


def execute(
    spec: RequestSpec,
    transport: Transport | None = None,
    image_decoder: ImageDecoder | None = None,
) -> RequestOutcome:
    """
    Execute a request, retrying failed attempts

    Args:
        spec: Request to execute
        transport: Transport to open handles with; a private HttpxTransport
            is created (and closed with the request) when omitted
        image_decoder: Decoder used by ExecutedRequest.image()

    Returns:
        Success, Exhausted (retryable errors on every attempt) or
        OpenFailed (a non-retryable error such as an invalid URL)
    """
    owns_transport = transport is None
    if owns_transport:
        transport = HttpxTransport()

    url = spec.full_url()
    last_error: TransportError | None = None

    for attempt in range(1, spec.retry_count + 1):
        logger.debug(
            "Making HTTP request",
            method=spec.method.value,
            url=url,
            attempt=attempt,
            max_attempts=spec.retry_count,
        )

        handle: TransportHandle | None = None
        try:
            handle = transport.open(url)
            _configure(handle, spec)
        except TransportError as e:
            if handle is not None:
                handle.disconnect()
            if not e.retryable:
                logger.error(
                    "HTTP request failed, not retryable",
                    method=spec.method.value,
                    url=url,
                    attempt=attempt,
                    error=str(e),
                )
                if owns_transport:
                    transport.close()
                return OpenFailed(url=url, error=e, attempts=attempt)

            last_error = e
            if attempt < spec.retry_count:
                backoff_time = spec.retry_backoff * (2 ** (attempt - 1))
                logger.warning(
                    "HTTP request failed, retrying",
                    method=spec.method.value,
                    url=url,
                    attempt=attempt,
                    max_attempts=spec.retry_count,
                    error=str(e),
                    backoff_seconds=backoff_time,
                )
                if backoff_time > 0:
                    time.sleep(backoff_time)
            continue
        except BaseException:
            if handle is not None:
                handle.disconnect()
            if owns_transport:
                transport.close()
            raise

        request = ExecutedRequest(
            handle,
            image_decoder=image_decoder,
            on_close=transport.close if owns_transport else None,
        )
        return Success(request=request, attempts=attempt)

    logger.error(
        "HTTP request failed after all retries",
        method=spec.method.value,
        url=url,
        attempts=spec.retry_count,
        error=str(last_error),
    )
    if owns_transport:
        transport.close()
    return Exhausted(url=url, last_error=last_error, attempts=spec.retry_count)
