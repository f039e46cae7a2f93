"""Configuration for the shared default sessions.

Values are read once from ``COMPOSEHTTP_*`` environment variables and cached.
Sessions injected with ``Request.set_session`` ignore this configuration.
"""

import os
from functools import lru_cache
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ._utils.constants import (
    DEFAULT_USER_AGENT,
    ENV_DISABLE_SSL_VERIFY,
    ENV_FOLLOW_REDIRECTS,
    ENV_TIMEOUT,
    ENV_USER_AGENT,
    ENV_VERIFY_SSL,
)

# Maps environment variable names to Config fields.
_ENV_FIELD_MAP: dict[str, str] = {
    ENV_TIMEOUT: "timeout",
    ENV_FOLLOW_REDIRECTS: "follow_redirects",
    ENV_VERIFY_SSL: "verify_ssl",
    ENV_USER_AGENT: "user_agent",
}


class Config(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    timeout: Optional[float] = Field(
        default=None, ge=0, description="Seconds; None keeps the httpx default"
    )
    follow_redirects: bool = True
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT


@lru_cache(maxsize=1)
def load_config() -> Config:
    """Build the configuration from the environment.

    Returns:
        Config: The validated configuration. Unset or empty variables fall
            back to the field defaults.

    Raises:
        pydantic.ValidationError: If a variable holds a value of the wrong type,
            e.g. ``COMPOSEHTTP_TIMEOUT=soon``.
    """
    values: dict[str, Any] = {}
    for env_var, field_name in _ENV_FIELD_MAP.items():
        value = os.environ.get(env_var)
        if value:
            values[field_name] = value

    if os.environ.get(ENV_DISABLE_SSL_VERIFY):
        values["verify_ssl"] = False

    return Config.model_validate(values)


def clear_config_cache() -> None:
    """Clear the cached configuration. Intended for tests."""
    load_config.cache_clear()
