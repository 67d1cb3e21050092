"""
Chunked, resumable uploads to the store.

An upload runs as a small state machine over one UploadSession:

    DISCOVERING -> ALLOCATING -> SENDING_CHUNK -> COMPLETE
         |              |              |
         +--------------+--------------+--> FAILED | CANCELLED

DISCOVERING looks for a partial node holding earlier chunks of the same
file (same size, name and modification time). ALLOCATING creates a fresh
node when none is found. SENDING_CHUNK writes one chunk per step and stays
in that state until the file is fully transferred.

Chunks are sent strictly one after another and nothing is retried: a
failed call is continued by calling upload() again with resume=True, which
picks up after the last chunk the store acknowledged.
"""

import asyncio
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from common.constants import NODE_ENDPOINT
from common.logging_config import get_logger
from common.types import FileDescriptor, UploadStats, UploadTarget
from shock.client import ShockClient, json_part
from shock.exceptions import FileReadError, ShockError, TransportError
from shock.query import encode_component
from shock.schemas import ShockNode, UploadAttributes

logger = get_logger(__name__)

ProgressCallback = Callable[[UploadStats], None]
ErrorCallback = Callable[[ShockError], None]
CancelCheck = Callable[[], bool]


class UploadState(str, Enum):
    DISCOVERING = "discovering"
    ALLOCATING = "allocating"
    SENDING_CHUNK = "sending_chunk"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({UploadState.COMPLETE, UploadState.FAILED, UploadState.CANCELLED})


@dataclass
class UploadCallbacks:
    """Caller hooks for one upload call; all optional."""
    on_progress: Optional[ProgressCallback] = None
    on_error: Optional[ErrorCallback] = None
    is_cancelled: Optional[CancelCheck] = None


@dataclass
class UploadSession:
    """
    In-memory state of one upload call.

    Attributes:
        file: File being uploaded
        chunk_size: Bytes per chunk; taken from the node when resuming
        target: Node receiving the chunks
        current_chunk: Index of the next chunk to send (0-based)
        state: Current state machine state
        cancelled: Set once the caller's cancel check returned True
        chunks_sent: Chunks written by this call (excludes resumed ones)
        error: The error reported to the caller, if any
    """
    file: FileDescriptor
    chunk_size: int
    known_node_id: Optional[str] = None
    resume: bool = False
    target: UploadTarget = field(default_factory=UploadTarget)
    current_chunk: int = 0
    state: UploadState = UploadState.DISCOVERING
    cancelled: bool = False
    chunks_sent: int = 0
    error: Optional[ShockError] = None

    @property
    def total_chunks(self) -> int:
        return math.ceil(self.file.size / self.chunk_size)

    @property
    def uploaded_size(self) -> int:
        return min(self.file.size, self.current_chunk * self.chunk_size)

    @property
    def finished(self) -> bool:
        return self.current_chunk * self.chunk_size >= self.file.size

    def chunk_range(self) -> tuple[int, int]:
        """Byte range [start, end) of the current chunk."""
        start = self.current_chunk * self.chunk_size
        return start, min(self.file.size, start + self.chunk_size)

    def chunk_attributes(self) -> UploadAttributes:
        """Node attributes to store together with the current chunk."""
        sent = self.current_chunk + 1
        last_chunk = sent * self.chunk_size >= self.file.size
        return UploadAttributes.for_file(
            self.file,
            self.chunk_size,
            incomplete="0" if last_chunk else "1",
            chunks=str(sent),
        )

    def stats(self) -> UploadStats:
        return UploadStats(
            file_size=self.file.size,
            uploaded_size=self.uploaded_size,
            node_id=self.target.node_id,
        )


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an upload call."""
    state: UploadState
    node_id: Optional[str]
    file_size: int
    uploaded_size: int
    chunks_sent: int
    error: Optional[ShockError] = None

    @property
    def ok(self) -> bool:
        return self.state is UploadState.COMPLETE


class ResumableUploader:
    """Drives chunked uploads through a ShockClient."""

    def __init__(self, client: ShockClient, chunk_size: Optional[int] = None, owner: Optional[str] = None):
        """
        Args:
            client: Client used for every store request
            chunk_size: Chunk size for fresh uploads; defaults to the
                client's settings
            owner: Restrict the resume search to nodes owned by this user
        """
        self.client = client
        self.chunk_size = chunk_size or client.settings.chunk_size
        self.owner = owner
        self._steps = {
            UploadState.DISCOVERING: self._discover,
            UploadState.ALLOCATING: self._allocate,
            UploadState.SENDING_CHUNK: self._send_chunk,
        }

    async def upload(
        self,
        file: FileDescriptor,
        node_id: Optional[str] = None,
        resume: bool = False,
        on_progress: Optional[ProgressCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> UploadResult:
        """
        Upload a file, resuming an earlier partial upload when possible.

        Args:
            file: File to upload
            node_id: Node of an earlier attempt; resumed if it still matches
                the file, otherwise ignored
            resume: Search the store for a partial node of the same file
            on_progress: Called with UploadStats after discovery or
                allocation and after every acknowledged chunk
            on_error: Called at most once with the TransportError or
                FileReadError that ended the upload
            is_cancelled: Polled before reading and before sending each
                chunk; when it returns True the upload stops quietly

        Returns:
            UploadResult with the final state. Transport and read errors are
            reported through on_error and the result, never raised.
        """
        session = UploadSession(
            file=file,
            chunk_size=self.chunk_size,
            known_node_id=node_id,
            resume=resume,
        )
        callbacks = UploadCallbacks(on_progress, on_error, is_cancelled)
        logger.info(f"Starting upload of {file.name} ({file.size} bytes) [node_id={node_id} resume={resume}]")

        while session.state not in TERMINAL_STATES:
            step = self._steps[session.state]
            try:
                await step(session, callbacks)
            except (TransportError, FileReadError) as e:
                self._fail(session, callbacks, e)

        logger.info(
            f"Upload of {file.name} ended: state={session.state.value} node_id={session.target.node_id} "
            f"uploaded={session.uploaded_size}/{file.size} chunks_sent={session.chunks_sent}"
        )
        return UploadResult(
            state=session.state,
            node_id=session.target.node_id,
            file_size=file.size,
            uploaded_size=session.uploaded_size,
            chunks_sent=session.chunks_sent,
            error=session.error,
        )

    def _check_cancelled(self, session: UploadSession, callbacks: UploadCallbacks) -> bool:
        if callbacks.is_cancelled is not None and callbacks.is_cancelled():
            session.cancelled = True
            session.state = UploadState.CANCELLED
            logger.info(f"Upload of {session.file.name} cancelled at chunk {session.current_chunk}")
        return session.cancelled

    def _report_progress(self, session: UploadSession, callbacks: UploadCallbacks) -> None:
        if callbacks.on_progress is not None:
            callbacks.on_progress(session.stats())

    def _fail(self, session: UploadSession, callbacks: UploadCallbacks, error: ShockError) -> None:
        logger.error(f"Upload of {session.file.name} failed in state {session.state.value}: {error}")
        session.state = UploadState.FAILED
        session.error = error
        if callbacks.on_error is not None:
            callbacks.on_error(error)

    async def _discover(self, session: UploadSession, callbacks: UploadCallbacks) -> None:
        node = None

        if session.known_node_id:
            try:
                candidate = await self.client.get_node(session.known_node_id)
            except TransportError as e:
                logger.info(f"Could not fetch node {session.known_node_id} ({e}), falling back to search")
                candidate = None
            if self._check_cancelled(session, callbacks):
                return
            if candidate is not None and candidate.matches(session.file):
                node = candidate
            elif candidate is not None:
                logger.info(f"Node {candidate.id} does not match {session.file.name}, not resuming it")

        if node is None and session.resume:
            candidate = await self.client.check_file(session.file, owner=self.owner)
            if self._check_cancelled(session, callbacks):
                return
            if candidate is not None and candidate.matches(session.file):
                node = candidate

        if node is None:
            session.state = UploadState.ALLOCATING
            return

        self._resume_from(session, node, callbacks)

    def _resume_from(self, session: UploadSession, node: ShockNode, callbacks: UploadCallbacks) -> None:
        attributes = node.upload_attributes()
        session.target.node_id = node.id
        session.current_chunk = attributes.confirmed_chunks()
        session.chunk_size = attributes.stored_chunk_size() or self.chunk_size
        logger.info(
            f"Resuming node {node.id} at chunk {session.current_chunk} "
            f"of {session.total_chunks} [chunk_size={session.chunk_size}]"
        )
        self._report_progress(session, callbacks)
        session.state = UploadState.SENDING_CHUNK

    async def _allocate(self, session: UploadSession, callbacks: UploadCallbacks) -> None:
        attributes = UploadAttributes.for_file(session.file, session.chunk_size, incomplete="1")
        data = await self.client.post(
            NODE_ENDPOINT,
            files={'attributes': json_part('attributes', attributes.to_json_bytes())},
            data={'parts': str(session.total_chunks)},
        )
        if not isinstance(data, dict) or not data.get('id'):
            raise TransportError("Node allocation returned no id", method='POST', url=NODE_ENDPOINT)

        if self._check_cancelled(session, callbacks):
            return

        session.target.node_id = str(data['id'])
        logger.info(f"Allocated node {session.target.node_id} for {session.file.name} ({session.total_chunks} chunks)")
        self._report_progress(session, callbacks)
        session.state = UploadState.SENDING_CHUNK

    async def _send_chunk(self, session: UploadSession, callbacks: UploadCallbacks) -> None:
        if session.finished:
            session.state = UploadState.COMPLETE
            return

        if self._check_cancelled(session, callbacks):
            return

        index = session.current_chunk
        start, end = session.chunk_range()
        try:
            payload = await asyncio.to_thread(session.file.read_range, start, end)
        except OSError as e:
            raise FileReadError(f"error during upload at chunk {index}: {e}", chunk_index=index) from e

        if self._check_cancelled(session, callbacks):
            return

        attributes = session.chunk_attributes()
        logger.debug(f"Sending chunk {index + 1}/{session.total_chunks} of {session.file.name} [bytes {start}-{end}]")
        await self.client.put(
            f"{NODE_ENDPOINT}/{encode_component(session.target.node_id)}",
            files={
                str(index + 1): (session.file.name, payload, 'application/octet-stream'),
                'attributes': json_part('attributes', attributes.to_json_bytes()),
            },
        )

        session.current_chunk += 1
        session.chunks_sent += 1
        self._report_progress(session, callbacks)

        if session.finished:
            session.state = UploadState.COMPLETE
