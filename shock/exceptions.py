"""Exception classes for the Shock client and upload engine."""

from typing import Optional


class ShockError(Exception):
    """
    Base exception class for all Shock client errors.
    """
    pass


class ConfigurationError(ShockError):
    """
    Raised when a required construction parameter is missing or invalid.
    """
    pass


class TransportError(ShockError):
    """
    Raised when a request to the store fails: a non-2xx response, a network
    failure, or a body that is not a valid response envelope.
    """

    def __init__(
        self,
        detail: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.detail = detail
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(str(self))

    def __str__(self) -> str:
        where = f"{self.method} {self.url}" if self.method else (self.url or "request")
        if self.status_code is None:
            return f"{where} failed: {self.detail}"
        return f"{where} failed with status {self.status_code}: {self.detail}"


class FileReadError(ShockError):
    """
    Raised when a byte range of the local file cannot be read.
    """

    def __init__(self, detail: str, chunk_index: Optional[int] = None):
        self.detail = detail
        self.chunk_index = chunk_index
        super().__init__(detail)
