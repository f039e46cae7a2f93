"""HTTP vocabulary: methods, schemes and headers."""

from ._enums import Method, Scheme
from .header import HEADER_FIELDS, Header

__all__ = [
    "HEADER_FIELDS",
    "Header",
    "Method",
    "Scheme",
]
