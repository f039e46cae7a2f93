from .errors import (
    ComposeHttpError,
    EncodingError,
    InvalidUrlStringError,
    MalformedUrlError,
    NoBodyError,
    NotHttpResponseError,
    TextDecodeError,
    UnexpectedStatusCodeError,
)

__all__ = [
    "ComposeHttpError",
    "EncodingError",
    "InvalidUrlStringError",
    "MalformedUrlError",
    "NoBodyError",
    "NotHttpResponseError",
    "TextDecodeError",
    "UnexpectedStatusCodeError",
]
