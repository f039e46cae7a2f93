from collections.abc import Container, Mapping
from functools import cached_property
from logging import getLogger
from typing import Any, AsyncIterator, Callable, Iterator, Optional, Union

from httpx import Headers, StreamConsumed
from httpx import Response as HttpxResponse

from ._utils.constants import DEFAULT_DEBUG_FALLBACK, LOGGER_NAME
from .models.errors import (
    NoBodyError,
    NotHttpResponseError,
    TextDecodeError,
    UnexpectedStatusCodeError,
)
from .serialization import Decoder, JsonDecoder

_logger = getLogger(LOGGER_NAME)


class Response:
    """The result of a dispatched request.

    Holds the body bytes, if any, and the transport's response object for
    metadata. An empty body is treated the same as a missing one, so a ``204``
    response raises ``NoBodyError`` from every body accessor.

    Args:
        data: The response body.
        raw: The transport response carrying status and headers. ``None`` for
            responses built without transport metadata.
    """

    def __init__(self, data: Optional[bytes], raw: Any = None) -> None:
        self._data = bytes(data) if data else None
        self._raw = raw

    def __repr__(self) -> str:
        size = len(self._data) if self._data is not None else 0
        return f"<Response raw={self._raw!r} bytes={size}>"

    @property
    def raw(self) -> Any:
        """The transport response object."""
        return self._raw

    @property
    def headers(self) -> Headers:
        if isinstance(self._raw, HttpxResponse):
            return self._raw.headers
        return Headers()

    @cached_property
    def status_code(self) -> int:
        """The HTTP status code, read once from the transport response.

        Raises:
            NotHttpResponseError: If there is no HTTP response to read it from.
        """
        if not isinstance(self._raw, HttpxResponse):
            raise NotHttpResponseError()
        return self._raw.status_code

    def body_bytes(self) -> bytes:
        if self._data is None:
            raise NoBodyError()
        return self._data

    def body(
        self, decoder: Optional[Decoder] = None, as_: Optional[Any] = None
    ) -> Any:
        """Decode the body into a structured value.

        Args:
            decoder: Decoder to use. Defaults to ``JsonDecoder()``.
            as_: Optional target type, e.g. a pydantic model.

        Returns:
            The decoded value.

        Raises:
            NoBodyError: If the response has no body.
        """
        data = self.body_bytes()
        return (decoder or JsonDecoder()).decode(data, as_)

    def body_text(self, encoding: str = "utf-8") -> str:
        """Decode the body as text.

        Raises:
            NoBodyError: If the response has no body.
            TextDecodeError: If the bytes are not valid in ``encoding``.
        """
        data = self.body_bytes()
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as e:
            raise TextDecodeError(encoding) from e

    def verify_status_code(
        self,
        *,
        is_: Optional[int] = None,
        is_not: Optional[int] = None,
        is_in: Optional[Container[int]] = None,
        is_not_in: Optional[Container[int]] = None,
        or_raise: Union[BaseException, type[BaseException], None] = None,
        or_raise_decoded: Optional[Callable[..., BaseException]] = None,
        decoded_as: Optional[Any] = None,
        decoder: Optional[Decoder] = None,
    ) -> "Response":
        """Check the status code against exactly one condition.

        Ranges are plain containers, so ``is_in=range(200, 300)`` accepts
        every code from 200 through 299.

        On mismatch the first configured failure wins:

        1. ``or_raise`` is raised as given.
        2. The body is decoded (as ``decoded_as`` when set) and passed to
           ``or_raise_decoded``, as keyword arguments when it decodes to a
           mapping or as a single argument otherwise. The result is raised.
        3. ``UnexpectedStatusCodeError`` is raised.

        Args:
            is_: Code the status must equal.
            is_not: Code the status must differ from.
            is_in: Codes the status must be one of.
            is_not_in: Codes the status must not be one of.
            or_raise: Error to raise on mismatch.
            or_raise_decoded: Error factory fed with the decoded body.
            decoded_as: Target type for decoding the error body.
            decoder: Decoder for the error body. Defaults to ``JsonDecoder()``.

        Returns:
            Response: This response, unchanged.

        Raises:
            ValueError: If not exactly one condition is given.
            NoBodyError: If ``or_raise_decoded`` is used on a response without
                a body.
        """
        conditions = {
            name: expected
            for name, expected in (
                ("is", is_),
                ("is not", is_not),
                ("in", is_in),
                ("not in", is_not_in),
            )
            if expected is not None
        }
        if len(conditions) != 1:
            raise ValueError(
                "Exactly one of is_, is_not, is_in or is_not_in must be provided"
            )
        ((kind, expected),) = conditions.items()

        status_code = self.status_code
        if _status_matches(kind, expected, status_code):
            return self

        if or_raise is not None:
            raise or_raise
        if or_raise_decoded is not None:
            value = self.body(decoder, as_=decoded_as)
            if isinstance(value, Mapping):
                raise or_raise_decoded(**value)
            raise or_raise_decoded(value)
        raise UnexpectedStatusCodeError(status_code, f"{kind} {expected!r}")

    def print_debug(self, default: str = DEFAULT_DEBUG_FALLBACK) -> "Response":
        """Print the body as UTF-8 text, or ``default`` when that is impossible."""
        if self._data is None:
            print(default)
            return self
        try:
            print(self._data.decode("utf-8"))
        except UnicodeDecodeError:
            _logger.debug("Response body is not valid UTF-8")
            print(default)
        return self


def _status_matches(kind: str, expected: Any, status_code: int) -> bool:
    if kind == "is":
        return status_code == expected
    if kind == "is not":
        return status_code != expected
    if kind == "in":
        return status_code in expected
    return status_code not in expected


class ByteStream:
    """Single-pass iterator over the chunks of a streamed response body.

    The transport response is closed once iteration finishes, is abandoned
    through ``close()``, or the ``with`` block exits. Iterating a second time
    raises ``httpx.StreamConsumed``.
    """

    def __init__(self, raw: HttpxResponse, chunk_size: Optional[int] = None) -> None:
        self._raw = raw
        self._chunk_size = chunk_size
        self._consumed = False
        self.response = Response(None, raw)

    def __iter__(self) -> Iterator[bytes]:
        if self._consumed:
            raise StreamConsumed()
        self._consumed = True
        try:
            yield from self._raw.iter_bytes(self._chunk_size)
        finally:
            self._raw.close()

    def close(self) -> None:
        self._consumed = True
        self._raw.close()

    def __enter__(self) -> "ByteStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncByteStream:
    """Async counterpart of ``ByteStream``."""

    def __init__(self, raw: HttpxResponse, chunk_size: Optional[int] = None) -> None:
        self._raw = raw
        self._chunk_size = chunk_size
        self._consumed = False
        self.response = Response(None, raw)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        if self._consumed:
            raise StreamConsumed()
        self._consumed = True
        try:
            async for chunk in self._raw.aiter_bytes(self._chunk_size):
                yield chunk
        finally:
            await self._raw.aclose()

    async def aclose(self) -> None:
        self._consumed = True
        await self._raw.aclose()

    async def __aenter__(self) -> "AsyncByteStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
