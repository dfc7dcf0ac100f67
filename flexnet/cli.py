"""Console entry point: a TLS server that logs length-prefixed messages."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from .behaviors import infinite_read
from .errors import ServerError
from .listeners import SecureTcpNetListener
from .pkcs12 import Pkcs12CertificateSrc
from .servers import start_secure_server
from .sources import EnvEndpointAddressSrc

log = logging.getLogger(__name__)

DEFAULT_PORT = 4141


def configure_logs(min_level: int) -> logging.Handler:
    """Send log records at min_level and above to the console."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S")
    )
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(min_level)
    return handler


async def exact_read(connection) -> None:
    """Read messages prefixed by an 8-byte native-endian length, forever."""
    while True:
        header = await connection.read_exactly(8)
        size = int.from_bytes(header.data, sys.byteorder)
        message = await connection.read_exactly(size)
        text = message.to_text()
        log.info("Got message %s %s %s", size, len(text.encode()), text)


async def secure_server() -> None:
    """Run the TLS server configured from the environment until it stops."""
    handler = infinite_read(exact_read)
    try:
        await start_secure_server(
            EnvEndpointAddressSrc(DEFAULT_PORT),
            Pkcs12CertificateSrc("CERT_PATH", "CERT_PWD"),
            SecureTcpNetListener,
            handler,
        )
    except ServerError as err:
        log.error("server ended it's work with: %s", err)
    else:
        log.info("server ended it's work")


def main(argv: list[str] | None = None) -> None:
    argparse.ArgumentParser(description="Length-prefixed message TLS server.").parse_args(argv)
    configure_logs(logging.DEBUG)
    if load_dotenv():
        log.debug(".env loaded")
    else:
        log.debug(".env failed to load")
    asyncio.run(secure_server())


if __name__ == "__main__":
    main()