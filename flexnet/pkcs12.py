"""Certificate source that reads a PKCS#12 file named in the environment."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping

from .errors import ServerError
from .sources import Certificate

log = logging.getLogger(__name__)

_VAR_NOT_FOUND = "environment variable not found"


def _read_file(path: str) -> bytes:
    try:
        f = open(path, "rb")
    except OSError as err:
        raise ServerError(f"cannot read cert file: {err}") from err
    with f:
        try:
            return f.read()
        except OSError as err:
            log.error("read error %s", err)
            return b""


class Pkcs12CertificateSrc:
    """Reads the certificate path and password from named environment variables."""

    def __init__(
        self, cert_path_env: str, cert_pwd_env: str, environ: Mapping[str, str] | None = None
    ) -> None:
        self.cert_path_env = cert_path_env
        self.cert_pwd_env = cert_pwd_env
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    async def get(self) -> Certificate:
        """Load the certificate, raising ServerError when anything is missing."""
        pwd = self.environ.get(self.cert_pwd_env)
        if pwd is None:
            raise ServerError(f"cannot read cert password from env: {_VAR_NOT_FOUND}")
        path = self.environ.get(self.cert_path_env)
        if path is None:
            raise ServerError(f"cannot read cert path from env: {_VAR_NOT_FOUND}")
        content = await asyncio.to_thread(_read_file, path)
        return Certificate(cert_bytes=content, cert_pwd=pwd)