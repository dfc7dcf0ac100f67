"""Starting a server from its address source, listener type and handler."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from .sources import CertificateSrc, EndpointAddressSrc

log = logging.getLogger(__name__)


async def _serve(listener, server_handler: Callable[[object], Awaitable[None]]) -> None:
    log.info("server ready to receive new connections")
    try:
        await server_handler(listener)
    finally:
        close = getattr(listener, "close", None)
        if close is not None:
            await close()


async def start_server(
    endpoint_src: EndpointAddressSrc,
    listener_type,
    server_handler: Callable[[object], Awaitable[None]],
) -> None:
    """Bind a listener to the source's address and hand it to server_handler."""
    addr = endpoint_src.get()
    log.info("server will try to use %s:%s", addr.host, addr.port)
    listener = await listener_type.bind(addr)
    await _serve(listener, server_handler)


async def start_secure_server(
    endpoint_src: EndpointAddressSrc,
    certificate_src: CertificateSrc,
    listener_type,
    server_handler: Callable[[object], Awaitable[None]],
) -> None:
    """Like start_server, but the listener is bound with a certificate."""
    addr = endpoint_src.get()
    log.info("server will try to use %s:%s", addr.host, addr.port)
    certificate = await certificate_src.get()
    listener = await listener_type.bind(addr, certificate)
    await _serve(listener, server_handler)