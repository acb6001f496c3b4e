# Assumptions:
# - A request is described once and never mutated afterwards
# - Form fields on a POST replace any explicit body
# - Retry count is the total number of attempts, not extra attempts

import dataclasses
from dataclasses import dataclass, field

from ..config.settings import DEFAULT_CONNECTION_TIMEOUT_MS
from .methods import RequestMethod
from .params import KeyValuePair, append_query, encode_pairs

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
FORCE_CACHE_DIRECTIVE = "only-if-cached"


@dataclass(frozen=True)
class RequestSpec:
    """Immutable description of a request to execute"""

    url: str
    method: RequestMethod = RequestMethod.GET
    url_params: tuple[KeyValuePair, ...] = field(default_factory=tuple)
    form_fields: tuple[KeyValuePair, ...] = field(default_factory=tuple)
    headers: tuple[KeyValuePair, ...] = field(default_factory=tuple)
    body: str | None = None
    use_cache: bool = False
    force_cache: bool = False
    timeout_ms: int = DEFAULT_CONNECTION_TIMEOUT_MS
    retry_count: int = 1
    retry_backoff: float = 0.0

    def __post_init__(self):
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got: {self.timeout_ms}")
        if self.retry_count < 1:
            raise ValueError(f"retry_count must be >= 1, got: {self.retry_count}")
        if self.retry_backoff < 0:
            raise ValueError(f"retry_backoff must be >= 0, got: {self.retry_backoff}")

    def query_string(self) -> str:
        return encode_pairs(self.url_params)

    def full_url(self) -> str:
        """Base URL with the encoded query string appended when params exist"""
        return append_query(self.url, self.query_string())

    def form_body(self) -> str:
        return encode_pairs(self.form_fields)

    def uses_form_encoding(self) -> bool:
        return self.method is RequestMethod.POST and len(self.form_fields) > 0

    def effective_body(self) -> str | None:
        """Body that will be written, after the form override is applied"""
        if self.uses_form_encoding():
            return self.form_body()
        return self.body

    def evolve(self, **changes) -> "RequestSpec":
        """Create a copy with some fields replaced"""
        return dataclasses.replace(self, **changes)
