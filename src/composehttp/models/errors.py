from typing import Any, Optional


class ComposeHttpError(Exception):
    """Base class for every error raised by composehttp itself.

    Transport failures (``httpx.HTTPError`` and friends) are never wrapped in
    this hierarchy; they reach the caller exactly as httpx raised them.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MalformedUrlError(ComposeHttpError, ValueError):
    """Raised when accumulated URL components cannot form an absolute URL."""

    def __init__(
        self,
        message: str = "Couldn't create a URL from the provided components.",
    ):
        super().__init__(message)


class InvalidUrlStringError(ComposeHttpError, ValueError):
    """Raised when a string passed to a request constructor is not a URL."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        message = f"Invalid URL string: {url!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EncodingError(ComposeHttpError):
    """Raised when a request body value cannot be serialized to bytes."""


class NoBodyError(ComposeHttpError):
    def __init__(self, message: str = "The response does not contain any data."):
        super().__init__(message)


class TextDecodeError(ComposeHttpError):
    """Raised when response bytes are not valid in the requested text encoding."""

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Couldn't convert the response data to a {encoding} string.")


class NotHttpResponseError(ComposeHttpError):
    def __init__(
        self, message: str = "The underlying response is not an HTTP response."
    ):
        super().__init__(message)


class UnexpectedStatusCodeError(ComposeHttpError):
    """Raised by a status code gate when no caller supplied error is given.

    Attributes:
        status_code: The status code the response actually carried.
        expected: Human readable description of the failed condition.
    """

    def __init__(self, status_code: int, expected: Any):
        self.status_code = status_code
        self.expected = expected
        super().__init__(
            f"Unexpected status code {status_code}, expected status code {expected}"
        )
