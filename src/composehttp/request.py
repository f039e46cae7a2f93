from collections.abc import Iterable
from logging import getLogger
from typing import Any, Optional, Union

from httpx import URL, AsyncClient, Client, Headers, InvalidURL
from httpx import Request as HttpxRequest

from ._session import get_default_session, get_default_session_async
from ._utils._errors import handle_encoding_errors
from ._utils.constants import LOGGER_NAME
from .http import Header, Method
from .models.errors import EncodingError, InvalidUrlStringError
from .response import AsyncByteStream, ByteStream, Response
from .serialization import Decoder, Encoder, JsonEncoder

_logger = getLogger(LOGGER_NAME)

# Values never written to the debug log.
_REDACTED_HEADERS = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie"}
)

UrlLike = Union[URL, str]
Session = Union[Client, AsyncClient]


def _loggable_headers(headers: Headers) -> dict[str, str]:
    return {
        field: "[REDACTED]" if field.lower() in _REDACTED_HEADERS else value
        for field, value in headers.items()
    }


def _parse_url(url: UrlLike) -> URL:
    if isinstance(url, URL):
        return url
    if not url.strip():
        raise InvalidUrlStringError(url, "empty")
    try:
        return URL(url)
    except InvalidURL as e:
        raise InvalidUrlStringError(url, str(e)) from e


class Request:
    """Fluent builder for a single HTTP request.

    Every setter mutates the builder and returns it, so a request reads as one
    chain::

        response = (
            Request.post("https://example.com/items")
            .set_headers(Header.content_type("application/json"))
            .set_body({"x": 1})
            .send()
        )

    Builders are meant for one owner. Each ``send`` family call performs a
    fresh exchange through the session; without ``set_session`` the shared
    default session is used.
    """

    def __init__(self, method: Union[Method, str], url: UrlLike) -> None:
        self._method = Method.parse(method)
        self._url = _parse_url(url)
        self._headers = Headers()
        self._body: Optional[bytes] = None
        self._session: Optional[Client] = None
        self._session_async: Optional[AsyncClient] = None

    def __repr__(self) -> str:
        return f"<Request {self._method.value} {self._url}>"

    # Creation

    @classmethod
    def for_method(cls, method: Union[Method, str], url: UrlLike) -> "Request":
        return cls(method, url)

    @classmethod
    def get(cls, url: UrlLike) -> "Request":
        return cls(Method.GET, url)

    @classmethod
    def head(cls, url: UrlLike) -> "Request":
        return cls(Method.HEAD, url)

    @classmethod
    def post(cls, url: UrlLike) -> "Request":
        return cls(Method.POST, url)

    @classmethod
    def put(cls, url: UrlLike) -> "Request":
        return cls(Method.PUT, url)

    @classmethod
    def patch(cls, url: UrlLike) -> "Request":
        return cls(Method.PATCH, url)

    @classmethod
    def delete(cls, url: UrlLike) -> "Request":
        return cls(Method.DELETE, url)

    @classmethod
    def options(cls, url: UrlLike) -> "Request":
        return cls(Method.OPTIONS, url)

    # State

    @property
    def method(self) -> Method:
        return self._method

    @property
    def url(self) -> URL:
        return self._url

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def body(self) -> Optional[bytes]:
        return self._body

    # Headers

    def set_header(self, header: Header) -> "Request":
        """Insert or replace a header, matching the field case-insensitively.

        A header whose value is ``None`` removes the field.
        """
        if header.value is None:
            self._headers.pop(header.field, None)
        else:
            self._headers[header.field] = header.value
        return self

    def set_headers(self, *headers: Union[Header, Iterable[Header]]) -> "Request":
        """Apply several headers in order; accepts headers or iterables of them."""
        for item in headers:
            if isinstance(item, Header):
                self.set_header(item)
            else:
                for header in item:
                    self.set_header(header)
        return self

    # Body

    def set_body(self, value: Any, encoder: Optional[Encoder] = None) -> "Request":
        """Set the request body.

        Bytes-like values are used as they are, strings are UTF-8 encoded and
        anything else goes through ``encoder`` (``JsonEncoder()`` by default).
        No ``Content-Type`` header is added.

        Raises:
            EncodingError: If the value cannot be encoded.
        """
        if isinstance(value, (bytes, bytearray, memoryview)):
            self._body = bytes(value)
        elif isinstance(value, str):
            self._body = value.encode("utf-8")
        else:
            with handle_encoding_errors():
                data = (encoder or JsonEncoder()).encode(value)
            if not isinstance(data, (bytes, bytearray)):
                raise EncodingError(
                    f"Encoder returned {type(data).__name__}, expected bytes"
                )
            self._body = bytes(data)
        return self

    # Misc

    def set_session(self, session: Session) -> "Request":
        """Dispatch through ``session`` instead of the shared default.

        A ``Client`` serves the sync methods, an ``AsyncClient`` the async ones.
        """
        if isinstance(session, AsyncClient):
            self._session_async = session
        elif isinstance(session, Client):
            self._session = session
        else:
            raise TypeError(
                f"Expected httpx.Client or httpx.AsyncClient, got {type(session).__name__}"
            )
        return self

    # Dispatch

    def _build(self, session: Session) -> HttpxRequest:
        _logger.debug(f"Request: {self._method.value} {self._url}")
        _logger.debug(f"HEADERS: {_loggable_headers(self._headers)}")
        return session.build_request(
            self._method.value,
            self._url,
            headers=self._headers,
            content=self._body,
        )

    def send(self) -> Response:
        """Perform the exchange and buffer the whole response.

        Transport errors from httpx propagate unchanged.
        """
        session = self._session or get_default_session()
        response = session.send(self._build(session))
        _logger.debug(f"Response: {response.status_code}")
        return Response(response.content, response)

    async def send_async(self) -> Response:
        session = self._session_async or get_default_session_async()
        response = await session.send(self._build(session))
        _logger.debug(f"Response: {response.status_code}")
        return Response(response.content, response)

    def send_stream(self, chunk_size: Optional[int] = None) -> ByteStream:
        """Perform the exchange without buffering the body.

        The returned stream must be iterated or closed to release the
        connection.
        """
        session = self._session or get_default_session()
        response = session.send(self._build(session), stream=True)
        _logger.debug(f"Response: {response.status_code} (streaming)")
        return ByteStream(response, chunk_size)

    async def send_stream_async(
        self, chunk_size: Optional[int] = None
    ) -> AsyncByteStream:
        session = self._session_async or get_default_session_async()
        response = await session.send(self._build(session), stream=True)
        _logger.debug(f"Response: {response.status_code} (streaming)")
        return AsyncByteStream(response, chunk_size)

    def send_body(
        self, decoder: Optional[Decoder] = None, as_: Optional[Any] = None
    ) -> Any:
        """``send()`` followed by ``Response.body(decoder, as_)``."""
        return self.send().body(decoder, as_)

    async def send_body_async(
        self, decoder: Optional[Decoder] = None, as_: Optional[Any] = None
    ) -> Any:
        response = await self.send_async()
        return response.body(decoder, as_)
