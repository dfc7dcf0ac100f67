# flexnet

A small asyncio toolkit for building TCP and TLS servers from interchangeable parts:

- **address sources** that say where to listen (`EnvEndpointAddressSrc` reads `HOST` and `PORT`),
- **certificate sources** that supply a PKCS#12 identity (`Pkcs12CertificateSrc`),
- **listeners** that bind and accept connections (`NetTcpListener`, `SecureTcpNetListener`),
- **connections** that read raw or exact-length messages (`NetTcpConnection`, `SecureNetTcpConnection`),
- **behaviours** that drive a listener and hand each connection to a handler (`infinite_read`).

Every failure along the way is raised as a `ServerError` with a readable message.

## Installation

```
pip install .
```

## Running the demo server

The bundled command starts a TLS server that reads length-prefixed messages
(an 8-byte native-endian length followed by that many UTF-8 bytes) and logs each one.

It takes its settings from the environment, or from a `.env` file in the working directory:

| Variable    | Meaning                                   |
|-------------|-------------------------------------------|
| `HOST`      | address to bind (required)                |
| `PORT`      | port to bind; falls back to 4141          |
| `CERT_PATH` | path to a PKCS#12 (`.p12`/`.pfx`) file    |
| `CERT_PWD`  | password of that file                     |

```
flexnet
```

## Using the library

```python
import asyncio

from flexnet.behaviors import infinite_read, log_messages
from flexnet.listeners import NetTcpListener
from flexnet.servers import start_server
from flexnet.sources import EnvEndpointAddressSrc


async def run() -> None:
    handler = infinite_read(log_messages)
    await start_server(EnvEndpointAddressSrc(4141), NetTcpListener, handler)


asyncio.run(run())
```

For TLS, pass a certificate source and the secure listener:

```python
from flexnet.listeners import SecureTcpNetListener
from flexnet.pkcs12 import Pkcs12CertificateSrc
from flexnet.servers import start_secure_server

await start_secure_server(
    EnvEndpointAddressSrc(4141),
    Pkcs12CertificateSrc("CERT_PATH", "CERT_PWD"),
    SecureTcpNetListener,
    infinite_read(log_messages),
)
```

`infinite_read` accepts connections until the listener fails, running each handler
as its own task; when accepting fails it waits for the running handlers, logs how
each ended, and raises the accept error.

## Tests

```
pip install ".[test]"
pytest
```