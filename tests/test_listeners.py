import asyncio
import datetime
import ssl

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from flexnet.errors import ServerError
from flexnet.listeners import NetTcpListener, SecureTcpNetListener
from flexnet.sources import Certificate, EndpointAddress

PASSWORD = "password"


def _bundle(password=PASSWORD):
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    data = pkcs12.serialize_key_and_certificates(
        b"test", key, cert, None, serialization.BestAvailableEncryption(password.encode())
    )
    return Certificate(cert_bytes=data, cert_pwd=password)


def _client_ctx():
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


@pytest.mark.asyncio
async def test_plain_round_trip():
    listener = await NetTcpListener.bind(EndpointAddress("127.0.0.1", 0))
    async with listener:
        _, writer = await asyncio.open_connection("127.0.0.1", listener.port)
        writer.write(b"hello")
        await writer.drain()
        conn = await listener.accept()
        msg = await conn.read_exactly(5)
        assert msg.data == b"hello"
        writer.close()
        await conn.close()


@pytest.mark.asyncio
async def test_bind_twice_fails():
    first = await NetTcpListener.bind(EndpointAddress("127.0.0.1", 0))
    async with first:
        with pytest.raises(ServerError, match="^cannot start server because"):
            await NetTcpListener.bind(EndpointAddress("127.0.0.1", first.port))


@pytest.mark.asyncio
async def test_accept_after_close():
    listener = await NetTcpListener.bind(EndpointAddress("127.0.0.1", 0))
    await listener.close()
    with pytest.raises(ServerError, match="error when server tried to accept connection"):
        await listener.accept()


@pytest.mark.asyncio
async def test_secure_bad_cert():
    with pytest.raises(ServerError, match="^cannot read cert"):
        await SecureTcpNetListener.bind(
            EndpointAddress("127.0.0.1", 0), Certificate(b"garbage", PASSWORD)
        )


@pytest.mark.asyncio
async def test_secure_wrong_password():
    bundle = _bundle()
    with pytest.raises(ServerError, match="^cannot read cert"):
        await SecureTcpNetListener.bind(
            EndpointAddress("127.0.0.1", 0), Certificate(bundle.cert_bytes, "secret")
        )


@pytest.mark.asyncio
async def test_secure_round_trip():
    listener = await SecureTcpNetListener.bind(EndpointAddress("127.0.0.1", 0), _bundle())
    async with listener:
        conn, (_, writer) = await asyncio.gather(
            listener.accept(),
            asyncio.open_connection("127.0.0.1", listener.port, ssl=_client_ctx()),
        )
        writer.write(b"secure")
        await writer.drain()
        msg = await conn.read_exactly(6)
        assert msg.data == b"secure"
        writer.close()
        await conn.close()


@pytest.mark.asyncio
async def test_secure_plaintext_client_fails_handshake():
    listener = await SecureTcpNetListener.bind(EndpointAddress("127.0.0.1", 0), _bundle())
    async with listener:
        _, writer = await asyncio.open_connection("127.0.0.1", listener.port)
        writer.write(b"GET / HTTP/1.0\r\n\r\n")
        await writer.drain()
        writer.close()
        with pytest.raises(ServerError, match="error when server tried to secure connection"):
            await asyncio.wait_for(listener.accept(), 5)