"""Messages read from a connection."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ServerError


@dataclass(frozen=True)
class NetMessage:
    """A chunk of bytes received from a peer."""

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def to_text(self) -> str:
        """Decode the message as UTF-8, raising ServerError if it is not valid."""
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError as err:
            raise ServerError(str(err)) from err

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)