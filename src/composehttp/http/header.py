"""HTTP header values and the catalog of named header constructors."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

# Symbolic name -> canonical wire name, filled in as the catalog is declared.
_FIELDS: dict[str, str] = {}


def _display(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class _Named:
    """Class level constructor for one catalog header, e.g. ``Header.accept``."""

    def __init__(self, field: str) -> None:
        self.field = field

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        _FIELDS[name] = self.field

    def __get__(self, instance: Any, owner: type) -> Callable[[Any], "Header"]:
        field = self.field

        def build(value: Any) -> "Header":
            return owner(field, _display(value))

        build.__name__ = self.name
        build.__doc__ = f"The ``{field}`` header."
        return build


@dataclass(frozen=True)
class Header:
    """A single HTTP header field and its display string value.

    Build headers through the named constructors, which know the canonical
    field name, or through ``Header.custom`` for anything else::

        Header.content_type("application/json")
        Header.content_length(42)            # value "42"
        Header.custom("X-Request-Id", uuid4())

    A ``None`` value clears the field when the header is set on a request.
    Neither field names nor values are validated.
    """

    field: str
    value: Optional[str]

    @classmethod
    def custom(cls, field: str, value: Any) -> "Header":
        """A header with an arbitrary field name."""
        return cls(field, _display(value))

    @classmethod
    def named(cls, name: str, value: Any) -> "Header":
        """Look a catalog header up by its symbolic name, e.g. ``"content_type"``.

        Raises:
            KeyError: If ``name`` is not in the catalog.
        """
        return cls(_FIELDS[name], _display(value))

    accept = _Named("Accept")
    accept_charset = _Named("Accept-Charset")
    accept_encoding = _Named("Accept-Encoding")
    accept_language = _Named("Accept-Language")
    accept_datetime = _Named("Accept-Datetime")
    access_control_request_method = _Named("Access-Control-Request-Method")
    access_control_request_headers = _Named("Access-Control-Request-Headers")
    authorization = _Named("Authorization")
    cache_control = _Named("Cache-Control")
    connection = _Named("Connection")
    content_length = _Named("Content-Length")
    content_type = _Named("Content-Type")
    cookie = _Named("Cookie")
    date = _Named("Date")
    expect = _Named("Expect")
    forwarded = _Named("Forwarded")
    from_ = _Named("From")
    host = _Named("Host")
    if_match = _Named("If-Match")
    if_modified_since = _Named("If-Modified-Since")
    if_none_match = _Named("If-None-Match")
    if_range = _Named("If-Range")
    if_unmodified_since = _Named("If-Unmodified-Since")
    max_forwards = _Named("Max-Forwards")
    origin = _Named("Origin")
    pragma = _Named("Pragma")
    proxy_authorization = _Named("Proxy-Authorization")
    range = _Named("Range")
    referer = _Named("Referer")
    te = _Named("TE")
    user_agent = _Named("User-Agent")
    upgrade = _Named("Upgrade")
    via = _Named("Via")
    warning = _Named("Warning")


#: Read-only view of the catalog, symbolic name -> canonical wire name.
HEADER_FIELDS: Mapping[str, str] = MappingProxyType(_FIELDS)
