# Assumptions:
# - Method names are sent upper-case on the request line
# - One method per request, chosen before execution

from enum import Enum


class RequestMethod(str, Enum):
    """HTTP request methods"""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, value: "str | RequestMethod") -> "RequestMethod":
        """Resolve a method from an enum member or a case-insensitive name"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unsupported request method: {value}")
