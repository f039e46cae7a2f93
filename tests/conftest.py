import json
import sys
from pathlib import Path
from typing import Generator

import httpx
import pytest

# Ensure local source package (src/composehttp) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from composehttp import clear_config_cache, close_default_sessions  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clean environment variables and shared sessions around each test."""
    for name in (
        "COMPOSEHTTP_TIMEOUT",
        "COMPOSEHTTP_FOLLOW_REDIRECTS",
        "COMPOSEHTTP_VERIFY_SSL",
        "COMPOSEHTTP_DISABLE_SSL_VERIFY",
        "COMPOSEHTTP_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_config_cache()
    yield
    close_default_sessions()
    clear_config_cache()


@pytest.fixture
def base_url() -> str:
    return "https://example.com"


def _echo(request: httpx.Request) -> httpx.Response:
    """Answer 201 with the request body, and the request line in headers."""
    return httpx.Response(
        201,
        content=request.content,
        headers={
            "X-Echo-Method": request.method,
            "X-Echo-Url": str(request.url),
            "X-Echo-Headers": json.dumps(dict(request.headers)),
        },
    )


@pytest.fixture
def echo_session() -> Generator[httpx.Client, None, None]:
    with httpx.Client(transport=httpx.MockTransport(_echo)) as client:
        yield client


@pytest.fixture
def echo_session_async() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(_echo))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
