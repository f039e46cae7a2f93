from contextlib import contextmanager
from typing import Generator

from ..models.errors import EncodingError


@contextmanager
def handle_encoding_errors() -> Generator[None, None, None]:
    """Context manager converting serializer failures into ``EncodingError``.

    Encoders are pluggable, so the failure type is unknown in advance: pydantic
    raises ``PydanticSerializationError``, the standard ``json`` module raises
    ``TypeError`` or ``ValueError``, custom encoders raise whatever they like.

    Yields:
        None: The context manager yields control to the wrapped code.

    Raises:
        EncodingError: For any exception raised by the wrapped code. The
            original exception is chained as ``__cause__``.
    """
    try:
        yield
    except EncodingError:
        raise
    except Exception as e:
        raise EncodingError(f"Couldn't encode the request body: {e}") from e
