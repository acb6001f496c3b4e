# Assumptions:
# - Query strings and form bodies share application/x-www-form-urlencoded rules
# - Names and values are encoded independently as UTF-8
# - Repeated names are legal and keep their order

from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote_plus, unquote_plus

PAIR_SEPARATOR = "&"
NAME_VALUE_SEPARATOR = "="
ENCODING = "utf-8"


@dataclass(frozen=True)
class KeyValuePair:
    """Ordered name/value pair used for params, form fields and headers"""

    name: str
    value: str

    def encode(self) -> str:
        return (
            quote_plus(self.name, safe="", encoding=ENCODING)
            + NAME_VALUE_SEPARATOR
            + quote_plus(self.value, safe="", encoding=ENCODING)
        )


def encode_pairs(pairs: Iterable[KeyValuePair]) -> str:
    """Serialize pairs as name=value segments joined by '&'"""
    return PAIR_SEPARATOR.join(pair.encode() for pair in pairs)


def decode_pairs(encoded: str) -> tuple[KeyValuePair, ...]:
    """Inverse of encode_pairs"""
    if not encoded:
        return ()
    pairs = []
    for segment in encoded.split(PAIR_SEPARATOR):
        name, _, value = segment.partition(NAME_VALUE_SEPARATOR)
        pairs.append(
            KeyValuePair(
                unquote_plus(name, encoding=ENCODING),
                unquote_plus(value, encoding=ENCODING),
            )
        )
    return tuple(pairs)


def append_query(url: str, query: str) -> str:
    """Attach an encoded query string, leaving the URL untouched when it is empty"""
    if not query:
        return url
    return f"{url}?{query}"
