"""composehttp - fluent request building on top of httpx."""

from ._config import Config, clear_config_cache, load_config
from ._session import (
    aclose_default_sessions,
    close_default_sessions,
    get_default_session,
    get_default_session_async,
)
from ._version import __version__
from .http import HEADER_FIELDS, Header, Method, Scheme
from .models.errors import (
    ComposeHttpError,
    EncodingError,
    InvalidUrlStringError,
    MalformedUrlError,
    NoBodyError,
    NotHttpResponseError,
    TextDecodeError,
    UnexpectedStatusCodeError,
)
from .request import Request
from .response import AsyncByteStream, ByteStream, Response
from .serialization import Decoder, Encoder, JsonDecoder, JsonEncoder
from .url import UrlBuilder, UrlComponents

__all__ = [
    "__version__",
    "AsyncByteStream",
    "ByteStream",
    "ComposeHttpError",
    "Config",
    "Decoder",
    "Encoder",
    "EncodingError",
    "HEADER_FIELDS",
    "Header",
    "InvalidUrlStringError",
    "JsonDecoder",
    "JsonEncoder",
    "MalformedUrlError",
    "Method",
    "NoBodyError",
    "NotHttpResponseError",
    "Request",
    "Response",
    "Scheme",
    "TextDecodeError",
    "UnexpectedStatusCodeError",
    "UrlBuilder",
    "UrlComponents",
    "aclose_default_sessions",
    "clear_config_cache",
    "close_default_sessions",
    "get_default_session",
    "get_default_session_async",
    "load_config",
]
