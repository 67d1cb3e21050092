"""FileDescriptor implementations for files on disk and in memory."""

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class LocalFile:
    """
    A file on the local filesystem.

    size and last_modified are captured when the descriptor is created, so a
    file modified afterwards is still matched by its original identity.
    """
    path: Path
    size: int
    name: str
    last_modified: int

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'LocalFile':
        """
        Describe a local file.

        Raises:
            OSError: If the file does not exist or cannot be stat'ed
        """
        path = Path(path)
        stat = path.stat()
        if not path.is_file():
            raise IsADirectoryError(f"Not a file: {path}")
        return cls(
            path=path,
            size=stat.st_size,
            name=path.name,
            last_modified=int(stat.st_mtime * 1000),
        )

    def read_range(self, start: int, end: int) -> bytes:
        with open(self.path, 'rb') as f:
            f.seek(start)
            data = f.read(end - start)
        if len(data) != end - start:
            raise OSError(
                f"Short read from {self.path}: expected {end - start} bytes at offset {start}, got {len(data)}"
            )
        return data


@dataclass(frozen=True)
class MemoryFile:
    """An in-memory byte buffer presented as a file."""
    name: str
    data: bytes = field(repr=False)
    last_modified: Optional[int] = None

    def __post_init__(self):
        if self.last_modified is None:
            object.__setattr__(self, 'last_modified', int(time.time() * 1000))

    @property
    def size(self) -> int:
        return len(self.data)

    def read_range(self, start: int, end: int) -> bytes:
        return self.data[start:end]


def describe(path: Union[str, Path]) -> LocalFile:
    """Shortcut for LocalFile.from_path with user expansion."""
    return LocalFile.from_path(os.path.expanduser(str(path)))
