"""Shared data type definitions (UploadTarget, UploadStats, FileDescriptor)."""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@dataclass
class UploadTarget:
    """
    Destination record of one upload session.

    node_id is None until the store has allocated (or resume discovery has
    located) a node, and does not change afterwards.
    """
    node_id: Optional[str] = None


@dataclass(frozen=True)
class UploadStats:
    """
    Progress snapshot passed to upload progress callbacks.
    """
    file_size: int
    uploaded_size: int
    node_id: Optional[str]

    @property
    def fraction(self) -> float:
        if self.file_size == 0:
            return 1.0
        return self.uploaded_size / self.file_size


@runtime_checkable
class FileDescriptor(Protocol):
    """
    Read-only reference to local file bytes.

    size, name and last_modified (milliseconds since the epoch) identify the
    content when matching an upload against a partial node in the store.
    """
    size: int
    name: str
    last_modified: int

    def read_range(self, start: int, end: int) -> bytes:
        """Return bytes [start, end) of the file."""
        ...
