"""Pluggable body encoders and decoders.

``JsonEncoder`` and ``JsonDecoder`` are the defaults used by ``Request.set_body``
and ``Response.body``. Anything implementing the ``Encoder`` or ``Decoder``
protocol can be passed in their place.
"""

import json
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import TypeAdapter
from pydantic_core import to_json


@runtime_checkable
class Encoder(Protocol):
    """Turns a structured value into request body bytes."""

    def encode(self, value: Any) -> bytes: ...


@runtime_checkable
class Decoder(Protocol):
    """Turns response body bytes into a structured value."""

    def decode(self, data: bytes, as_: Optional[Any] = None) -> Any: ...


class JsonEncoder:
    """JSON encoder backed by pydantic's serializer.

    Handles plain containers and scalars as well as pydantic models,
    dataclasses, enums, ``datetime`` and ``UUID`` values.

    Args:
        by_alias: Use field aliases when serializing pydantic models.
        exclude_none: Drop fields whose value is ``None``.
        indent: Pretty print with this many spaces; ``None`` for compact output.
    """

    def __init__(
        self,
        *,
        by_alias: bool = True,
        exclude_none: bool = False,
        indent: Optional[int] = None,
    ) -> None:
        self.by_alias = by_alias
        self.exclude_none = exclude_none
        self.indent = indent

    def encode(self, value: Any) -> bytes:
        return to_json(
            value,
            indent=self.indent,
            by_alias=self.by_alias,
            exclude_none=self.exclude_none,
        )


class JsonDecoder:
    """JSON decoder.

    Without a target type the payload is parsed with ``json.loads`` into plain
    Python objects. With ``as_`` the payload is validated by pydantic into that
    type, which may be a model, a dataclass, a ``TypedDict`` or any annotation
    pydantic understands.

    Parse errors are not wrapped: callers see ``json.JSONDecodeError`` or
    ``pydantic.ValidationError``.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    def decode(self, data: bytes, as_: Optional[Any] = None) -> Any:
        if as_ is None:
            return json.loads(data)
        return TypeAdapter(as_).validate_json(data, strict=self.strict)
