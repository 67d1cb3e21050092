"""Client library for the Shock object store, with resumable chunked uploads."""

from shock.client import ShockClient
from shock.exceptions import ConfigurationError, FileReadError, ShockError, TransportError
from shock.files import LocalFile, MemoryFile
from shock.schemas import ShockNode, UploadAttributes
from shock.settings import ClientSettings
from shock.upload import ResumableUploader, UploadResult, UploadState

__all__ = [
    "ShockClient",
    "ClientSettings",
    "ResumableUploader",
    "UploadResult",
    "UploadState",
    "ShockNode",
    "UploadAttributes",
    "LocalFile",
    "MemoryFile",
    "ShockError",
    "ConfigurationError",
    "TransportError",
    "FileReadError",
]
