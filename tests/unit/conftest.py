# Assumptions:
# - Scripted in-memory transport for executor and builder tests
# - Each handle records the configuration it received

import io

import pytest

from httpbuilder.errors import InvalidURLError, ProtocolError, TransportIOError
from httpbuilder.transport.port import Transport, TransportHandle


class RecordingBodyStream(io.BytesIO):
    def __init__(self, handle):
        super().__init__()
        self._handle = handle

    def close(self):
        if not self.closed:
            self._handle.body = self.getvalue()
            self._handle.body_closed = True
        super().close()


class FakeHandle(TransportHandle):
    """Handle that records configuration and optionally fails on connect"""

    def __init__(self, url, fail_with=None, status=200, body=b""):
        self._url = url
        self.fail_with = fail_with
        self.status = status
        self.response_body = body
        self.method = None
        self.timeout_ms = None
        self.use_cache = None
        self.headers = []
        self.cache_directives = []
        self.output_enabled = False
        self.body = None
        self.body_closed = False
        self.connected = False
        self.disconnect_calls = 0

    @property
    def url(self):
        return self._url

    def set_method(self, method):
        self.method = method

    def set_connect_timeout(self, timeout_ms):
        self.timeout_ms = timeout_ms

    def set_use_cache(self, use_cache):
        self.use_cache = use_cache

    def set_header(self, name, value):
        self.headers = [(k, v) for k, v in self.headers if k.lower() != name.lower()]
        self.headers.append((name, value))

    def add_header(self, name, value):
        self.headers.append((name, value))

    def add_cache_control(self, directive):
        self.cache_directives.append(directive)

    def enable_output(self):
        self.output_enabled = True

    def open_output_stream(self):
        if not self.output_enabled:
            raise ProtocolError(self._url, "Output not enabled")
        return RecordingBodyStream(self)

    def connect(self):
        if self.fail_with is not None:
            raise self.fail_with
        self.connected = True

    def get_status(self):
        return self.status

    def get_response_headers(self):
        return []

    def get_input_stream(self):
        return io.BytesIO(self.response_body)

    def get_error_stream(self):
        return None

    @property
    def disconnected(self):
        return self.disconnect_calls > 0

    def disconnect(self):
        self.disconnect_calls += 1


class FakeTransport(Transport):
    """Transport whose first `failures` handles fail to connect"""

    def __init__(self, failures=0, open_error=None, error_factory=None):
        self.failures = failures
        self.open_error = open_error
        self.error_factory = error_factory or (lambda url: TransportIOError(url, "Connection reset"))
        self.opened_urls = []
        self.handles = []

    def open(self, url):
        self.opened_urls.append(url)
        if self.open_error is not None:
            raise self.open_error
        fail_with = self.error_factory(url) if len(self.handles) < self.failures else None
        handle = FakeHandle(url, fail_with=fail_with)
        self.handles.append(handle)
        return handle


@pytest.fixture
def fake_transport():
    """Transport that succeeds on the first attempt"""
    return FakeTransport()


@pytest.fixture
def make_fake_transport():
    """Factory for scripted transports"""

    def factory(failures=0, open_error=None, error_factory=None):
        return FakeTransport(failures=failures, open_error=open_error, error_factory=error_factory)

    return factory


@pytest.fixture
def invalid_url_error():
    return InvalidURLError("not a url", "Malformed URL")
