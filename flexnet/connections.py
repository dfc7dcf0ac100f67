"""Connections that messages are read from."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

from .errors import ServerError
from .messages import NetMessage


@runtime_checkable
class NetConnection(Protocol):
    """A connection that messages can be read from."""

    async def read(self, buffer_len: int) -> NetMessage: ...

    async def read_exactly(self, buffer_len: int) -> NetMessage: ...


def _read_error(err: BaseException) -> ServerError:
    return ServerError(f"error when read from connection: {err}")


def _check_len(buffer_len: int) -> None:
    if buffer_len < 0:
        raise ValueError("buffer_len must not be negative")


class NetTcpConnection:
    """A TCP connection over asyncio streams."""

    def __init__(self, reader: asyncio.StreamReader, writer: Any) -> None:
        self._reader = reader
        self._writer = writer

    async def read(self, buffer_len: int) -> NetMessage:
        """Read at most buffer_len bytes; an empty message means the peer closed."""
        _check_len(buffer_len)
        try:
            data = await self._reader.read(buffer_len)
        except OSError as err:
            raise _read_error(err) from err
        return NetMessage(data)

    async def read_exactly(self, buffer_len: int) -> NetMessage:
        """Read exactly buffer_len bytes or raise ServerError."""
        _check_len(buffer_len)
        try:
            data = await self._reader.readexactly(buffer_len)
        except asyncio.IncompleteReadError as err:
            raise _read_error("early eof") from err
        except OSError as err:
            raise _read_error(err) from err
        return NetMessage(data)

    async def close(self) -> None:
        """Close the underlying stream."""
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError:
            pass

    async def __aenter__(self) -> NetTcpConnection:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class SecureNetTcpConnection(NetTcpConnection):
    """A TCP connection whose streams are wrapped in TLS."""

    @property
    def cipher(self) -> Any:
        """The negotiated cipher, as reported by the transport."""
        return self._writer.get_extra_info("cipher")