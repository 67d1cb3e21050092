"""Synchronous facade over the async Shock client for CLI commands."""

import asyncio
import json
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from cli.config import Config
from cli.utils import CancelOnInterrupt, UploadProgressPrinter, format_file_size
from common.logging_config import get_logger
from shock.client import ShockClient
from shock.exceptions import ConfigurationError, ShockError, TransportError
from shock.files import describe
from shock.schemas import ShockNode
from shock.settings import ClientSettings
from shock.upload import ResumableUploader, UploadState

logger = get_logger(__name__)

T = TypeVar("T")


class StoreClient:
    """Runs store operations for the REPL and formats their results."""

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize store client.

        Args:
            config: Configuration instance
            transport: Optional httpx transport, used by tests
        """
        self.config = config
        self.transport = transport

    def _run(self, operation: Callable[[ShockClient], Awaitable[T]]) -> T:
        """
        Run one operation on a fresh ShockClient inside its own event loop.

        Settings are re-read from the config on every call so that 'token'
        and 'config' changes apply immediately.

        Raises:
            ConfigurationError: If shock_url is not configured
        """
        settings = ClientSettings.from_config(self.config)

        async def runner() -> T:
            async with ShockClient(settings, transport=self.transport) as client:
                return await operation(client)

        return asyncio.run(runner())

    def _format_error(self, error: ShockError) -> str:
        """
        Map client errors to user-friendly messages.

        Args:
            error: Error raised by the client

        Returns:
            User-friendly error message
        """
        if isinstance(error, ConfigurationError):
            return f"{error}. Set the store URL with: config shock_url <url>"

        if isinstance(error, TransportError):
            if error.status_code is None:
                return f"Cannot reach the store: {error.detail}"
            status_messages = {
                400: 'Bad request',
                401: 'Not authenticated. Set a token with: token <value>',
                403: 'Access forbidden',
                404: 'Node not found',
                500: 'Server error',
                502: 'Bad gateway',
                503: 'Service unavailable',
            }
            message = status_messages.get(error.status_code, f"Request failed ({error.status_code})")
            return f"{message}: {error.detail}"

        return str(error)

    def set_token(self, token: str) -> str:
        self.config.set_token(token)
        logger.info("Token updated")
        return "Token saved to config."

    def logout(self) -> str:
        self.config.set_token(None)
        return "Token removed from config."

    def show_config(self) -> str:
        lines = ["Configuration:"]
        for key in ("shock_url", "chunk_size", "timeout"):
            lines.append(f"  {key}: {self.config.get(key)}")
        lines.append(f"  token: {'set' if self.config.get_token() else 'not set'}")
        return '\n'.join(lines)

    def set_config(self, key: str, value: str) -> str:
        try:
            self.config.set(key, value)
        except ValueError:
            return f"Error: {key} must be an integer"
        return f"{key} set to {self.config.get(key)}"

    def upload(self, path: str, resume: bool = False, node_id: Optional[str] = None) -> str:
        """
        Upload a local file with a progress line.

        Args:
            path: Local file path
            resume: Search the store for a partial upload of the same file
            node_id: Node of an earlier attempt to continue

        Returns:
            Formatted result message
        """
        try:
            file = describe(path)
        except OSError as e:
            return f"Error: Cannot read {path}: {e}"

        printer = UploadProgressPrinter(file.name)
        errors: list[ShockError] = []

        try:
            with CancelOnInterrupt() as cancel_check:
                result = self._run(
                    lambda client: ResumableUploader(client).upload(
                        file,
                        node_id=node_id,
                        resume=resume,
                        on_progress=printer,
                        on_error=errors.append,
                        is_cancelled=cancel_check,
                    )
                )
        except ShockError as e:
            return f"Error: {self._format_error(e)}"
        finally:
            printer.finish()

        if result.state is UploadState.COMPLETE:
            return (
                f"Uploaded: {file.name} ({format_file_size(file.size)})\n"
                f"Node ID: {result.node_id}"
            )

        progress = f"{format_file_size(result.uploaded_size)} / {format_file_size(result.file_size)}"
        if result.state is UploadState.CANCELLED:
            message = f"Upload cancelled at {progress}."
        else:
            detail = self._format_error(errors[0]) if errors else "unknown error"
            message = f"Upload failed at {progress}: {detail}"

        if result.node_id:
            message += f"\nResume with: upload {path} --node {result.node_id}"
        return message

    def show_node(self, node_id: str) -> str:
        try:
            node = self._run(lambda client: client.get_node(node_id))
        except ShockError as e:
            return f"Error: {self._format_error(e)}"
        return format_node(node)

    def list_nodes(
        self,
        filters: dict,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        owner: Optional[str] = None,
    ) -> str:
        try:
            nodes = self._run(
                lambda client: client.get_nodes(query=filters or None, owner=owner, limit=limit, offset=offset)
            )
        except ShockError as e:
            return f"Error: {self._format_error(e)}"

        if not nodes:
            return "No nodes found."

        output = [f"Found {len(nodes)} node(s):\n"]
        for node in nodes:
            attributes = node.upload_attributes()
            name = attributes.file_name or _stored_file(node).get('name') or '-'
            status = {"1": "incomplete", "0": "complete"}.get(attributes.incomplete or "", "")
            line = f"  - {node.id}  {name}"
            if status:
                line += f"  [{status}, {attributes.confirmed_chunks()} chunk(s)]"
            output.append(line)
        return '\n'.join(output)

    def show_acl(self, node_id: str) -> str:
        try:
            acl = self._run(lambda client: client.get_node_acls(node_id))
        except ShockError as e:
            return f"Error: {self._format_error(e)}"
        return f"ACL for {node_id}:\n{json.dumps(acl, indent=2, sort_keys=True)}"

    def set_attributes(self, node_id: str, attributes: dict) -> str:
        try:
            node = self._run(lambda client: client.update_node(node_id, attributes))
        except ShockError as e:
            return f"Error: {self._format_error(e)}"
        return f"Attributes updated.\n{format_node(node)}"

    def rename(self, node_id: str, file_name: str) -> str:
        try:
            self._run(lambda client: client.change_node_file_name(node_id, file_name))
        except ShockError as e:
            return f"Error: {self._format_error(e)}"
        return f"Node {node_id} file name set to {file_name}"

    def delete(self, node_id: str) -> str:
        try:
            self._run(lambda client: client.delete_node(node_id))
        except ShockError as e:
            return f"Error: {self._format_error(e)}"
        return f"Deleted node {node_id}"


def _stored_file(node: ShockNode) -> dict:
    stored = (node.model_extra or {}).get('file')
    return stored if isinstance(stored, dict) else {}


def format_node(node: ShockNode) -> str:
    """Render a node for display."""
    lines = [f"Node {node.id}"]
    stored = _stored_file(node)
    if stored:
        size = stored.get('size')
        size_str = format_file_size(size) if isinstance(size, int) else '?'
        lines.append(f"  File: {stored.get('name') or '-'} ({size_str})")
    if node.attributes:
        lines.append("  Attributes:")
        for key, value in sorted(node.attributes.items()):
            lines.append(f"    {key}: {value}")
    else:
        lines.append("  Attributes: none")
    return '\n'.join(lines)
