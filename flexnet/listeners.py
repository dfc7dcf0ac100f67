"""Listeners that accept plain and TLS-secured TCP connections."""

from __future__ import annotations

import asyncio
import logging
import os
import ssl
import tempfile
from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from .connections import NetTcpConnection, SecureNetTcpConnection
from .errors import ServerError
from .sources import Certificate, EndpointAddress

log = logging.getLogger(__name__)


@runtime_checkable
class NetAcceptable(Protocol):
    """Anything that hands out incoming connections."""

    async def accept(self): ...


def _bind_error(err: BaseException) -> ServerError:
    return ServerError(f"cannot start server because: {err}")


def _receive_error(err: object) -> ServerError:
    return ServerError(f"error when server tried to accept connection: {err}")


class _StreamListener:
    """Collects connections from an asyncio server into a queue."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._server: asyncio.AbstractServer | None = None
        self._closed = False

    async def _on_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        await self._queue.put((reader, writer))

    async def _start(self, addr: EndpointAddress) -> None:
        try:
            self._server = await asyncio.start_server(self._on_client, addr.host, addr.port)
        except (OSError, ValueError) as err:
            raise _bind_error(err) from err

    @property
    def port(self) -> int:
        """The port actually bound."""
        assert self._server is not None
        return self._server.sockets[0].getsockname()[1]

    async def _next_streams(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        if self._closed:
            raise _receive_error("listener is closed")
        item = await self._queue.get()
        if item is None:
            self._queue.put_nowait(None)
            raise _receive_error("listener is closed")
        return item

    async def close(self) -> None:
        """Stop listening and drop pending connections."""
        if self._closed:
            return
        self._closed = True
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is not None:
                item[1].close()
        self._queue.put_nowait(None)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class NetTcpListener(_StreamListener):
    """Plain TCP listener."""

    @classmethod
    async def bind(cls, addr: EndpointAddress) -> NetTcpListener:
        """Start listening on addr, raising ServerError on failure."""
        listener = cls()
        await listener._start(addr)
        return listener

    async def accept(self) -> NetTcpConnection:
        """Wait for the next connection."""
        reader, writer = await self._next_streams()
        return NetTcpConnection(reader, writer)

    async def close(self) -> None:
        await super().close()


def _ssl_context(cert: Certificate) -> ssl.SSLContext:
    try:
        password = cert.cert_pwd.encode() if cert.cert_pwd else None
        key, leaf, extra = pkcs12.load_key_and_certificates(cert.cert_bytes, password)
        if key is None or leaf is None:
            raise ValueError("bundle holds no key or no certificate")
        key_pem = key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        chain_pem = b"".join(
            c.public_bytes(serialization.Encoding.PEM) for c in [leaf, *(extra or [])]
        )
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        with tempfile.TemporaryDirectory() as tmp:
            cert_path = os.path.join(tmp, "cert.pem")
            key_path = os.path.join(tmp, "key.pem")
            with open(cert_path, "wb") as f:
                f.write(chain_pem)
            with open(key_path, "wb") as f:
                f.write(key_pem)
            context.load_cert_chain(cert_path, key_path)
        return context
    except (ValueError, TypeError, ssl.SSLError, OSError) as err:
        raise ServerError(f"cannot read cert: {err}") from err


class SecureTcpNetListener(_StreamListener):
    """TCP listener that secures each accepted connection with TLS."""

    def __init__(self, context: ssl.SSLContext) -> None:
        super().__init__()
        self._context = context

    @classmethod
    async def bind(cls, addr: EndpointAddress, cert: Certificate) -> SecureTcpNetListener:
        """Load the PKCS#12 certificate and start listening on addr."""
        listener = cls(_ssl_context(cert))
        await listener._start(addr)
        return listener

    async def accept(self) -> SecureNetTcpConnection:
        """Wait for the next connection and complete the TLS handshake."""
        reader, writer = await self._next_streams()
        try:
            await writer.start_tls(self._context)
        except (ssl.SSLError, OSError, EOFError) as err:
            writer.close()
            raise ServerError(f"error when server tried to secure connection: {err}") from err
        return SecureNetTcpConnection(reader, writer)

    async def close(self) -> None:
        await super().close()