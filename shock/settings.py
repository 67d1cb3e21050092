"""Immutable request settings shared by every call to the store."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from common.constants import DEFAULT_CHUNK_SIZE_BYTES, DEFAULT_TIMEOUT_SECONDS
from shock.exceptions import ConfigurationError


class ConfigSource(Protocol):
    """Synchronous key-value configuration source."""

    def get(self, key: str, default: Any = None) -> Any:
        ...


@dataclass(frozen=True)
class ClientSettings:
    """
    Connection settings passed explicitly to each request.

    Attributes:
        url: Base URL of the store (everything before "/node")
        token: Bearer token; requests are anonymous when None
        chunk_size: Default upload chunk size in bytes
        timeout: Per-request timeout in seconds, enforced by httpx
    """
    url: str
    token: Optional[str] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE_BYTES
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        if not self.url:
            raise ConfigurationError('Missing parameter "url"')
        if not isinstance(self.chunk_size, int) or self.chunk_size <= 0:
            raise ConfigurationError(f"Invalid chunk size: {self.chunk_size!r}")
        object.__setattr__(self, 'url', self.url.rstrip('/'))

    @classmethod
    def from_config(cls, source: ConfigSource) -> 'ClientSettings':
        """
        Build settings from a key-value source (keys: shock_url, token,
        chunk_size, timeout).

        Raises:
            ConfigurationError: If shock_url is missing or a value is malformed
        """
        try:
            chunk_size = int(source.get('chunk_size') or DEFAULT_CHUNK_SIZE_BYTES)
            timeout = float(source.get('timeout') or DEFAULT_TIMEOUT_SECONDS)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric configuration value: {e}")

        return cls(
            url=source.get('shock_url'),
            token=source.get('token') or None,
            chunk_size=chunk_size,
            timeout=timeout,
        )

