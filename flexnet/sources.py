"""Where the server gets its address and its certificate from."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .errors import ServerError

log = logging.getLogger(__name__)

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_VAR_NOT_FOUND = "environment variable not found"


@dataclass
class EndpointAddress:
    """Host and port the server listens on."""

    host: str
    port: int


@runtime_checkable
class EndpointAddressSrc(Protocol):
    """Anything that can produce an EndpointAddress."""

    def get(self) -> EndpointAddress: ...


@dataclass
class Certificate:
    """A PKCS#12 bundle and its password."""

    cert_bytes: bytes
    cert_pwd: str


@runtime_checkable
class CertificateSrc(Protocol):
    """Anything that can asynchronously produce a Certificate."""

    async def get(self) -> Certificate: ...


def _parse_i32(text: str) -> int:
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not re.fullmatch(r"[+-]?[0-9]+", text):
        raise ValueError("invalid digit found in string")
    value = int(text)
    if value > _I32_MAX:
        raise ValueError("number too large to fit in target type")
    if value < _I32_MIN:
        raise ValueError("number too small to fit in target type")
    return value


class EnvEndpointAddressSrc:
    """Reads HOST and PORT from the environment, falling back to a default port."""

    def __init__(self, default_port: int, environ: Mapping[str, str] | None = None) -> None:
        self.default_port = default_port
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _port(self) -> int:
        raw = self.environ.get("PORT")
        try:
            if raw is None:
                raise ServerError(f"could not read port from env: {_VAR_NOT_FOUND}")
            try:
                return _parse_i32(raw)
            except ValueError as err:
                raise ServerError(f"could not parse port from env: {err}") from err
        except ServerError as err:
            log.error('error occurred when reading port "%s", will take default', err)
            return self.default_port

    def get(self) -> EndpointAddress:
        """Return the configured address; raise ServerError when HOST is unset."""
        host = self.environ.get("HOST")
        if host is None:
            raise ServerError(f"host addr could not be provided: {_VAR_NOT_FOUND}")
        return EndpointAddress(host, self._port())