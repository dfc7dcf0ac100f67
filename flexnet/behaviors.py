"""What a server does with its listener and with each connection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .errors import ServerError

log = logging.getLogger(__name__)

ConnectionHandler = Callable[[object], Awaitable[None]]


def infinite_read(connection_handler: ConnectionHandler) -> Callable[[object], Awaitable[None]]:
    """Return a server handler that runs connection_handler for every connection."""

    async def handler(listener) -> None:
        await infinite_read_impl(listener, connection_handler)

    return handler


async def infinite_read_impl(listener, connection_handler: ConnectionHandler) -> None:
    """Accept connections until accepting fails, then wait for handlers and re-raise."""
    tasks: list[asyncio.Task] = []
    while True:
        log.info("waiting for new connections")
        try:
            connection = await listener.accept()
        except ServerError:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    log.error("connection handled with: %s", result)
                else:
                    log.info("connection handled")
            raise
        log.info("got connection")
        tasks.append(asyncio.create_task(connection_handler(connection)))


async def log_messages(connection) -> None:
    """Read 512-byte chunks and log them until a read is empty or fails."""
    while True:
        frame = await connection.read(512)
        msg = frame.to_text()
        if not msg:
            raise ServerError("empty read")
        log.info("received messages %s", msg)