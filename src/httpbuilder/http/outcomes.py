# Assumptions:
# - Three outcome shapes: success, retries exhausted, could not open
# - The failure cause is kept instead of collapsing to None

from dataclasses import dataclass
from typing import Union

from ..errors import RequestFailedError, TransportError
from .executed import ExecutedRequest


@dataclass(frozen=True)
class Success:
    """The request was configured, written and committed"""

    request: ExecutedRequest
    attempts: int
    ok = True

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> ExecutedRequest:
        return self.request


@dataclass(frozen=True)
class Exhausted:
    """Every attempt failed after the handle was opened"""

    url: str
    last_error: TransportError | None
    attempts: int
    ok = False
    request = None

    @property
    def error(self) -> TransportError | None:
        return self.last_error

    def unwrap(self) -> ExecutedRequest:
        raise RequestFailedError(self.url, self.attempts, self.last_error) from self.last_error


@dataclass(frozen=True)
class OpenFailed:
    """
    A non-retryable transport error ended execution

    Raised while opening the handle (bad URL, closed transport) or while
    connecting it; attempts is the attempt it happened on.
    """

    url: str
    error: TransportError
    attempts: int = 1
    ok = False
    request = None

    def unwrap(self) -> ExecutedRequest:
        raise RequestFailedError(self.url, self.attempts, self.error) from self.error


RequestOutcome = Union[Success, Exhausted, OpenFailed]
