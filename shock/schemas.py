"""Pydantic models for node records returned by the store."""

import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from common.types import FileDescriptor

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def leading_int(value: Optional[str]) -> Optional[int]:
    """
    Parse the integer prefix of a stored attribute, so "3abc" reads as 3.

    Returns None when the value is empty or does not start with digits.
    """
    if not value:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


class UploadAttributes(BaseModel):
    """
    Upload bookkeeping stored in a node's attributes.

    The store keeps every value as a string. file_size, file_name and
    file_time together identify the uploaded content.
    """
    model_config = ConfigDict(extra="allow")

    incomplete: Optional[str] = None
    file_size: Optional[str] = None
    file_name: Optional[str] = None
    file_time: Optional[str] = None
    chunks: Optional[str] = None
    chunk_size: Optional[str] = None
    incomplete_chunks: Optional[str] = None

    @field_validator(
        "incomplete", "file_size", "file_name", "file_time",
        "chunks", "chunk_size", "incomplete_chunks",
        mode="before",
    )
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @classmethod
    def for_file(cls, file: FileDescriptor, chunk_size: int, **extra: Any) -> "UploadAttributes":
        """Build attributes carrying the resume key of a file."""
        return cls(
            file_size=str(file.size),
            file_name=file.name,
            file_time=str(file.last_modified),
            chunk_size=str(chunk_size),
            **extra,
        )

    def matches(self, file: FileDescriptor) -> bool:
        """True when size, name and modification time all equal the file's."""
        return (
            self.file_size == str(file.size)
            and self.file_name == file.name
            and self.file_time == str(file.last_modified)
        )

    def confirmed_chunks(self) -> int:
        """Number of chunks the store has acknowledged, never negative."""
        count = leading_int(self.incomplete_chunks or self.chunks)
        return max(count, 0) if count is not None else 0

    def stored_chunk_size(self) -> Optional[int]:
        """Chunk size the node was written with; None when missing or not positive."""
        size = leading_int(self.chunk_size)
        if size is None or size <= 0:
            return None
        return size

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class ShockNode(BaseModel):
    """A stored-file record: id plus free-form attributes."""
    model_config = ConfigDict(extra="allow")

    id: str
    attributes: Optional[Dict[str, Any]] = None

    def upload_attributes(self) -> UploadAttributes:
        return UploadAttributes.model_validate(self.attributes or {})

    def matches(self, file: FileDescriptor) -> bool:
        return self.attributes is not None and self.upload_attributes().matches(file)
