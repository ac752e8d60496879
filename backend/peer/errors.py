"""Domain errors surfaced to HTTP clients as `{"error": ...}`."""


class PeerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientError(PeerError):
    """The request payload could not be parsed into the expected shape."""

    status_code = 400


class StoreError(PeerError):
    """The persistence layer failed (including connection loss)."""

    status_code = 500
