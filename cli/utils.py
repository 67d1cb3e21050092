"""Utility functions for CLI operations."""

import signal
import sys
import threading
from typing import Optional, TextIO

from cli.constants import GREEN, RESET
from common.types import UploadStats


class UploadProgressPrinter:
    """Progress callback that redraws a single status line on a stream."""

    def __init__(self, filename: str, stream: Optional[TextIO] = None):
        """
        Initialize the progress printer.

        Args:
            filename: Display name for the file
            stream: Output stream (stdout by default)
        """
        self.filename = filename
        self.stream = stream if stream is not None else sys.stdout
        self.last_stats: UploadStats | None = None
        self._started = False

    def __call__(self, stats: UploadStats) -> None:
        """Display current upload progress."""
        self.last_stats = stats
        self._started = True
        uploaded_str = format_file_size(stats.uploaded_size)
        total_str = format_file_size(stats.file_size)
        self.stream.write(
            f"\rUploading {self.filename}: {uploaded_str} / {total_str} ({GREEN}{stats.fraction * 100:.1f}%{RESET})"
        )
        self.stream.flush()

    def finish(self) -> None:
        """Finalize progress display with newline."""
        if self._started:
            self.stream.write('\n')
            self.stream.flush()
            self._started = False


class CancelOnInterrupt:
    """
    Context manager turning Ctrl-C into a cooperative cancel request.

    While active, SIGINT sets a flag instead of raising KeyboardInterrupt;
    the instance itself is the cancel check handed to the uploader.
    """

    def __init__(self):
        self._event = threading.Event()
        self._previous = None

    def __call__(self) -> bool:
        return self._event.is_set()

    def _handle(self, signum, frame) -> None:
        self._event.set()

    def __enter__(self) -> 'CancelOnInterrupt':
        if threading.current_thread() is threading.main_thread():
            self._previous = signal.signal(signal.SIGINT, self._handle)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._previous is not None:
            signal.signal(signal.SIGINT, self._previous)
            self._previous = None


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.
    
    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).
    
    Args:
        size_bytes: File size in bytes
        
    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    
    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0
    
    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    
    return f"{size:.2f} PiB"
