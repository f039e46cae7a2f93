from .._version import __version__

# Environment variables
ENV_TIMEOUT = "COMPOSEHTTP_TIMEOUT"
ENV_FOLLOW_REDIRECTS = "COMPOSEHTTP_FOLLOW_REDIRECTS"
ENV_VERIFY_SSL = "COMPOSEHTTP_VERIFY_SSL"
ENV_DISABLE_SSL_VERIFY = "COMPOSEHTTP_DISABLE_SSL_VERIFY"
ENV_USER_AGENT = "COMPOSEHTTP_USER_AGENT"

# Headers
HEADER_USER_AGENT = "User-Agent"

# Defaults
DEFAULT_USER_AGENT = f"composehttp/{__version__}"
DEFAULT_DEBUG_FALLBACK = "Failed To Print JSON"

LOGGER_NAME = "composehttp"
