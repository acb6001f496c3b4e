# Assumptions:
# - Fluent builder collects configuration, RequestSpec holds it immutably
# - Defaults are taken from RequestSettings
# - No validation or de-duplication of params, fields or headers

from ..config.settings import RequestSettings, get_settings
from ..imaging.port import ImageDecoder
from ..transport.port import Transport
from .executor import execute
from .methods import RequestMethod
from .outcomes import RequestOutcome
from .params import KeyValuePair
from .spec import RequestSpec


class RequestBuilder:
    """Chainable builder producing a RequestSpec and executing it"""

    def __init__(self, url: str, settings: RequestSettings | None = None):
        settings = settings or get_settings()
        self._url = url
        self._method = RequestMethod.GET
        self._url_params: list[KeyValuePair] = []
        self._form_fields: list[KeyValuePair] = []
        self._headers: list[KeyValuePair] = []
        self._body: str | None = None
        self._use_cache = settings.use_cache
        self._force_cache = False
        self._timeout_ms = settings.timeout_ms
        self._retry_count = settings.retry_count
        self._retry_backoff = settings.retry_backoff

        if settings.user_agent:
            self._headers.append(KeyValuePair("User-Agent", settings.user_agent))

    def add_url_param(self, name: str, value: str) -> "RequestBuilder":
        self._url_params.append(KeyValuePair(name, value))
        return self

    def add_form_field(self, name: str, value: str) -> "RequestBuilder":
        self._form_fields.append(KeyValuePair(name, value))
        return self

    def add_header(self, name: str, value: str) -> "RequestBuilder":
        self._headers.append(KeyValuePair(name, value))
        return self

    def set_use_cache(self, use_cache: bool) -> "RequestBuilder":
        """Allow or forbid the transport to answer from its cache"""
        self._use_cache = use_cache
        return self

    def set_force_cache(self, force_cache: bool) -> "RequestBuilder":
        """Require the response to come from cache only (Cache-Control: only-if-cached)"""
        self._force_cache = force_cache
        return self

    def set_method(self, method: RequestMethod | str) -> "RequestBuilder":
        self._method = RequestMethod.parse(method)
        return self

    def set_url(self, url: str) -> "RequestBuilder":
        self._url = url
        return self

    def set_body(self, body: str | None) -> "RequestBuilder":
        self._body = body
        return self

    def set_timeout(self, timeout_ms: int) -> "RequestBuilder":
        """Connect timeout in milliseconds"""
        self._timeout_ms = timeout_ms
        return self

    def set_retry_count(self, retry_count: int) -> "RequestBuilder":
        """Total number of attempts, at least one"""
        self._retry_count = retry_count
        return self

    def set_retry_backoff(self, seconds: float) -> "RequestBuilder":
        self._retry_backoff = seconds
        return self

    def to_spec(self) -> RequestSpec:
        """Snapshot the current configuration"""
        return RequestSpec(
            url=self._url,
            method=self._method,
            url_params=tuple(self._url_params),
            form_fields=tuple(self._form_fields),
            headers=tuple(self._headers),
            body=self._body,
            use_cache=self._use_cache,
            force_cache=self._force_cache,
            timeout_ms=self._timeout_ms,
            retry_count=self._retry_count,
            retry_backoff=self._retry_backoff,
        )

    def build(
        self,
        transport: Transport | None = None,
        image_decoder: ImageDecoder | None = None,
    ) -> RequestOutcome:
        """Execute the configured request"""
        return execute(self.to_spec(), transport=transport, image_decoder=image_decoder)
