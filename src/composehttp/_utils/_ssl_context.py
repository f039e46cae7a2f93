import os
import ssl
from typing import TYPE_CHECKING, Any, Optional, Union

import certifi

from .constants import HEADER_USER_AGENT

if TYPE_CHECKING:
    from .._config import Config

# Checked in order; the first one set replaces the certifi bundle.
_CA_FILE_VARS = ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE")
_CA_DIR_VAR = "SSL_CERT_DIR"


def _path_from_env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if not value:
        return None
    return os.path.expanduser(os.path.expandvars(value))


def create_ssl_context(config: "Config") -> Union[ssl.SSLContext, bool]:
    """Value for the httpx ``verify`` option of the default sessions.

    ``False`` when ``config.verify_ssl`` is off. Otherwise the system trust
    store through truststore, or, where truststore is unavailable, the
    certifi bundle unless ``SSL_CERT_FILE``/``REQUESTS_CA_BUNDLE`` point
    elsewhere.
    """
    if not config.verify_ssl:
        return False

    try:
        import truststore
    except ImportError:
        cafile = next(filter(None, map(_path_from_env, _CA_FILE_VARS)), None)
        return ssl.create_default_context(
            cafile=cafile or certifi.where(),
            capath=_path_from_env(_CA_DIR_VAR),
        )
    return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)


def get_httpx_client_kwargs(config: "Config") -> dict[str, Any]:
    """Keyword arguments shared by the default ``Client`` and ``AsyncClient``.

    Proxies are picked up from the environment by httpx itself (``trust_env``).
    """
    kwargs: dict[str, Any] = {
        "verify": create_ssl_context(config),
        "follow_redirects": config.follow_redirects,
        "trust_env": True,
        "headers": {HEADER_USER_AGENT: config.user_agent},
    }
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout
    return kwargs
