"""HTTP enums."""

from enum import Enum


class Method(str, Enum):
    """HTTP request methods. Values are the wire names."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, method: "Method | str") -> "Method":
        """Accept a ``Method`` or a case-insensitive method name."""
        if isinstance(method, Method):
            return method
        return cls(method.upper())


class Scheme(str, Enum):
    """URL schemes a request can be built for."""

    HTTP = "http"
    HTTPS = "https"
