"""Asyncio TCP and TLS server toolkit with pluggable listeners, connections and handlers."""

__version__ = "0.1.0"

__all__ = [
    "behaviors",
    "cli",
    "connections",
    "errors",
    "listeners",
    "messages",
    "pkcs12",
    "servers",
    "sources",
]