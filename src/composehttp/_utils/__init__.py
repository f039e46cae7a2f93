from ._errors import handle_encoding_errors
from ._ssl_context import create_ssl_context, get_httpx_client_kwargs

__all__ = [
    "handle_encoding_errors",
    "create_ssl_context",
    "get_httpx_client_kwargs",
]
