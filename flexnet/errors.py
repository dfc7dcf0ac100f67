"""Error type shared by every part of the server."""


class ServerError(Exception):
    """Raised when the server, a listener or a connection fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message