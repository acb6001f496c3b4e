"""Request construction, execution and response access."""

from .builder import RequestBuilder
from .executed import ExecutedRequest
from .executor import execute
from .methods import RequestMethod
from .outcomes import Exhausted, OpenFailed, RequestOutcome, Success
from .params import KeyValuePair, append_query, decode_pairs, encode_pairs
from .spec import RequestSpec

__all__ = [
    "RequestBuilder",
    "RequestSpec",
    "RequestMethod",
    "KeyValuePair",
    "ExecutedRequest",
    "RequestOutcome",
    "Success",
    "Exhausted",
    "OpenFailed",
    "execute",
    "encode_pairs",
    "decode_pairs",
    "append_query",
]
