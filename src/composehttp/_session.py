"""Shared default sessions used when a request has no injected session."""

import asyncio
import threading
from logging import getLogger
from typing import Optional
from weakref import WeakKeyDictionary

from httpx import AsyncClient, Client

from ._config import load_config
from ._utils._ssl_context import get_httpx_client_kwargs
from ._utils.constants import LOGGER_NAME

_logger = getLogger(LOGGER_NAME)

_lock = threading.Lock()
_default_session: Optional[Client] = None
# Pooled async connections belong to the loop that opened them.
_default_sessions_async: "WeakKeyDictionary[asyncio.AbstractEventLoop, AsyncClient]" = (
    WeakKeyDictionary()
)


def get_default_session() -> Client:
    """Return the process wide ``httpx.Client``, creating it on first use."""
    global _default_session

    with _lock:
        if _default_session is None or _default_session.is_closed:
            _default_session = Client(**get_httpx_client_kwargs(load_config()))
            _logger.debug("Created default session")
        return _default_session


def get_default_session_async() -> AsyncClient:
    """Return the ``httpx.AsyncClient`` of the running event loop.

    Each event loop gets its own client, created on first use, so consecutive
    ``asyncio.run`` calls never share connections.

    Raises:
        RuntimeError: If called outside a running event loop.
    """
    loop = asyncio.get_running_loop()

    with _lock:
        session = _default_sessions_async.get(loop)
        if session is None or session.is_closed:
            session = AsyncClient(**get_httpx_client_kwargs(load_config()))
            _default_sessions_async[loop] = session
            _logger.debug("Created default async session")
        return session


def _detach_default_sessions() -> tuple[
    Optional[Client], list[tuple[asyncio.AbstractEventLoop, AsyncClient]]
]:
    global _default_session

    with _lock:
        session, _default_session = _default_session, None
        sessions_async = list(_default_sessions_async.items())
        _default_sessions_async.clear()
    return session, sessions_async


def _close_on_loop(loop: asyncio.AbstractEventLoop, session: AsyncClient) -> None:
    if session.is_closed or loop.is_closed():
        return
    if loop.is_running():
        asyncio.run_coroutine_threadsafe(session.aclose(), loop)
        return
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        loop.run_until_complete(session.aclose())
    else:
        _logger.debug("Skipped closing an async session of an idle event loop")


def close_default_sessions() -> None:
    """Close the default sync session and every default async session.

    Async sessions are closed on their own event loop: awaited there when the
    loop is idle, scheduled when it is running. Sessions whose loop has
    already closed cannot be closed any more and are only dropped.
    """
    session, sessions_async = _detach_default_sessions()
    if session is not None:
        session.close()
    for loop, session_async in sessions_async:
        _close_on_loop(loop, session_async)


async def aclose_default_sessions() -> None:
    """Close both default sessions, awaiting the running loop's async one."""
    current = asyncio.get_running_loop()
    session, sessions_async = _detach_default_sessions()
    if session is not None:
        session.close()
    for loop, session_async in sessions_async:
        if loop is current:
            await session_async.aclose()
        else:
            _close_on_loop(loop, session_async)
