from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from httpx import URL, InvalidURL, QueryParams

from .http import Method, Scheme
from .models.errors import MalformedUrlError
from .request import Request

# Printable ASCII minus the delimiters that would end the component. Anything
# else, including non-ASCII text, is percent-encoded before httpx sees it.
_PRINTABLE_ASCII = "".join(chr(c) for c in range(0x21, 0x7F))
_PATH_SAFE = _PRINTABLE_ASCII.replace("?", "").replace("#", "")
_QUERY_SAFE = _PRINTABLE_ASCII.replace("#", "")

_FORBIDDEN_HOST_CHARS = set(" \t\r\n/?#@")


@dataclass
class UrlComponents:
    """The pieces a ``UrlBuilder`` accumulates."""

    scheme: str = Scheme.HTTPS.value
    host: Optional[str] = None
    path: Optional[str] = None
    query: Optional[str] = None
    port: Optional[int] = None
    fragment: Optional[str] = None


class UrlBuilder:
    """Fluent builder producing a URL and, from it, a ``Request``.

    Setters overwrite one component and return the same builder. Nothing is
    validated until a terminal call (``build``, ``to_request``, ``get`` ...),
    so intermediate states may be incomplete::

        request = (
            UrlBuilder.with_host("example.com")
            .path("/sub/page")
            .query("a=1")
            .get()
        )
        # GET https://example.com/sub/page?a=1
    """

    def __init__(self, components: Optional[UrlComponents] = None) -> None:
        self._components = replace(components) if components else UrlComponents()
        if not self._components.scheme:
            self._components.scheme = Scheme.HTTPS.value

    def __repr__(self) -> str:
        return f"<UrlBuilder {self._components!r}>"

    # Creation

    @classmethod
    def with_scheme(cls, scheme: Union[Scheme, str]) -> "UrlBuilder":
        return cls().scheme(scheme)

    @classmethod
    def with_host(cls, host: str) -> "UrlBuilder":
        return cls().host(host)

    @classmethod
    def from_components(cls, components: UrlComponents) -> "UrlBuilder":
        """Seed a builder with a copy of ``components``."""
        return cls(components)

    @property
    def components(self) -> UrlComponents:
        return self._components

    # Builder

    def scheme(self, scheme: Union[Scheme, str]) -> "UrlBuilder":
        self._components.scheme = (
            scheme.value if isinstance(scheme, Scheme) else scheme
        )
        return self

    def host(self, host: str) -> "UrlBuilder":
        self._components.host = host
        return self

    def path(self, path: str) -> "UrlBuilder":
        self._components.path = path
        return self

    def query(
        self,
        query: Union[str, Mapping[str, Any], Sequence[tuple[str, Any]]],
    ) -> "UrlBuilder":
        """Set the query from a raw string or from key/value pairs.

        Pairs are form-encoded, so ``{"q": "a b"}`` becomes ``q=a+b``.
        """
        if not isinstance(query, str):
            query = str(QueryParams(query))
        self._components.query = query
        return self

    def port(self, port: int) -> "UrlBuilder":
        self._components.port = port
        return self

    def fragment(self, fragment: str) -> "UrlBuilder":
        self._components.fragment = fragment
        return self

    # Terminal

    def build(self) -> URL:
        """Assemble the accumulated components into an absolute URL.

        Raises:
            MalformedUrlError: If the components do not form a valid absolute
                URL, e.g. the host is missing or the path is not rooted.
        """
        comp = self._components
        if not comp.scheme:
            raise MalformedUrlError("URL scheme is empty")
        if not comp.host:
            raise MalformedUrlError("URL host is not set")
        if _FORBIDDEN_HOST_CHARS.intersection(comp.host):
            raise MalformedUrlError(f"Invalid character in host {comp.host!r}")
        if comp.port is not None and not 0 <= comp.port <= 65535:
            raise MalformedUrlError(f"Port {comp.port} is out of range")

        kwargs: dict[str, Any] = {"scheme": comp.scheme, "host": comp.host}
        if comp.port is not None:
            kwargs["port"] = comp.port
        if comp.path:
            kwargs["path"] = quote(comp.path, safe=_PATH_SAFE)
        if comp.query:
            kwargs["query"] = quote(comp.query, safe=_QUERY_SAFE).encode("ascii")
        if comp.fragment is not None:
            kwargs["fragment"] = comp.fragment

        try:
            url = URL(**kwargs)
        except (InvalidURL, TypeError, ValueError) as e:
            raise MalformedUrlError(f"Couldn't create a URL: {e}") from e

        if not url.is_absolute_url:
            raise MalformedUrlError(f"{url} is not an absolute URL")
        return url

    def to_request(self, method: Union[Method, str]) -> Request:
        return Request.for_method(method, self.build())

    def get(self) -> Request:
        return self.to_request(Method.GET)

    def head(self) -> Request:
        return self.to_request(Method.HEAD)

    def post(self) -> Request:
        return self.to_request(Method.POST)

    def put(self) -> Request:
        return self.to_request(Method.PUT)

    def patch(self) -> Request:
        return self.to_request(Method.PATCH)

    def delete(self) -> Request:
        return self.to_request(Method.DELETE)

    def options(self) -> Request:
        return self.to_request(Method.OPTIONS)
