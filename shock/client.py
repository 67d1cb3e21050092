"""Async client for the Shock object store's node API."""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import ValidationError

from common.constants import ACL_ENDPOINT, NODE_ENDPOINT
from common.logging_config import get_logger
from common.types import FileDescriptor
from shock.exceptions import TransportError
from shock.query import encode_component, encode_query
from shock.schemas import ShockNode
from shock.settings import ClientSettings, ConfigSource
from shock.transport import (
    Files,
    delete_request,
    get_request,
    post_request,
    put_request,
)

logger = get_logger(__name__)


def json_part(name: str, payload: bytes) -> tuple:
    """Multipart file tuple for a JSON blob such as node attributes."""
    return (name, payload, 'text/json')


def parse_node(data: Any, url: str) -> ShockNode:
    """Validate a node record, reporting malformed ones as TransportError."""
    try:
        return ShockNode.model_validate(data)
    except ValidationError as e:
        raise TransportError(f"Malformed node record: {e.error_count()} validation error(s)", url=url) from e


class ShockClient:
    """
    Client for retrieving, creating, updating and deleting nodes.

    Holds one httpx.AsyncClient; use as an async context manager or call
    aclose() when done.
    """

    def __init__(self, settings: ClientSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the client.

        Args:
            settings: Immutable connection settings
            transport: Optional httpx transport (tests mount mocks or ASGI apps here)
        """
        self.settings = settings
        self._http = httpx.AsyncClient(transport=transport, timeout=settings.timeout)
        logger.debug(f"Initialized ShockClient [url={settings.url}]")

    @classmethod
    def from_config(cls, source: ConfigSource, transport: Optional[httpx.AsyncBaseTransport] = None) -> 'ShockClient':
        return cls(ClientSettings.from_config(source), transport=transport)

    async def __aenter__(self) -> 'ShockClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def url_for(self, *segments: str) -> str:
        """Join the base URL with encoded path segments."""
        return '/'.join([self.settings.url] + [encode_component(s) for s in segments])

    # Low-level verbs, paths relative to the base URL.

    async def get(self, path: str, query: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.settings.url}/{path.lstrip('/')}"
        if query:
            url += '?' + encode_query(query)
        return await get_request(self._http, url, self.settings)

    async def put(self, path: str, files: Optional[Files] = None, data: Optional[dict] = None) -> Any:
        return await put_request(self._http, f"{self.settings.url}/{path.lstrip('/')}", self.settings, files, data)

    async def post(self, path: str, files: Optional[Files] = None, data: Optional[dict] = None) -> Any:
        return await post_request(self._http, f"{self.settings.url}/{path.lstrip('/')}", self.settings, files, data)

    async def delete(self, path: str) -> None:
        await delete_request(self._http, f"{self.settings.url}/{path.lstrip('/')}", self.settings)

    # Node operations

    async def get_node(self, node_id: str) -> ShockNode:
        url = self.url_for(NODE_ENDPOINT, node_id)
        return parse_node(await get_request(self._http, url, self.settings), url)

    async def get_nodes(
        self,
        query: Optional[Dict[str, Any]] = None,
        query_node: Optional[Dict[str, Any]] = None,
        owner: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[ShockNode]:
        """
        List nodes visible to the configured token.

        Args:
            query: Attribute filters; adds the "query" flag
            query_node: Top-level node field filters, used when query is not
                given; adds the "querynode" flag
            owner: Restrict to nodes owned by this user
            limit: Maximum number of nodes returned
            offset: Number of matching nodes to skip

        Returns:
            Matching nodes, in store order
        """
        params: Dict[str, Any] = {}
        if query:
            params.update(query)
            params['query'] = True
        elif query_node:
            params.update(query_node)
            params['querynode'] = True
        if owner:
            params['owner'] = owner
        if limit:
            params['limit'] = limit
        if offset:
            params['offset'] = offset

        url = self.url_for(NODE_ENDPOINT)
        if params:
            url += '?' + encode_query(params)
        data = await get_request(self._http, url, self.settings)
        return [parse_node(node, url) for node in data or []]

    async def get_node_acls(self, node_id: str) -> Dict[str, Any]:
        return await get_request(self._http, self.url_for(NODE_ENDPOINT, node_id, ACL_ENDPOINT), self.settings)

    async def delete_node(self, node_id: str) -> None:
        logger.info(f"Deleting node {node_id}")
        await delete_request(self._http, self.url_for(NODE_ENDPOINT, node_id), self.settings)

    async def update_node(self, node_id: str, attributes: Dict[str, Any]) -> ShockNode:
        """
        Replace a node's attributes.

        Args:
            node_id: Node to update
            attributes: JSON-serializable metadata; existing values are replaced
        """
        payload = json.dumps(attributes).encode('utf-8')
        data = await put_request(
            self._http,
            self.url_for(NODE_ENDPOINT, node_id),
            self.settings,
            files={'attributes': json_part('attributes', payload)},
        )
        return parse_node(data, self.url_for(NODE_ENDPOINT, node_id))

    async def change_node_file_name(self, node_id: str, file_name: str) -> ShockNode:
        """Set the node's stored file name, typically after the last chunk."""
        data = await put_request(
            self._http,
            self.url_for(NODE_ENDPOINT, node_id),
            self.settings,
            files={'file_name': (None, file_name.encode('utf-8'))},
        )
        return parse_node(data, self.url_for(NODE_ENDPOINT, node_id))

    async def check_file(self, file: FileDescriptor, owner: Optional[str] = None) -> Optional[ShockNode]:
        """
        Find a node previously created for this file content.

        Args:
            file: File whose size, name and modification time are searched for
            owner: Only consider nodes owned by this user; without it the
                search covers every node the token can read

        Returns:
            The first node whose file_size, file_name and file_time attributes
            equal the file's, or None
        """
        nodes = await self.get_nodes(
            query={
                'file_size': file.size,
                'file_time': file.last_modified,
                'file_name': file.name,
            },
            owner=owner,
            limit=1,
        )
        if not nodes:
            return None
        return nodes[0]

    async def upload_node(
        self,
        file: FileDescriptor,
        node_id: Optional[str] = None,
        resume: bool = False,
        on_progress: Optional[Callable] = None,
        on_error: Optional[Callable] = None,
        is_cancelled: Optional[Callable[[], bool]] = None,
        owner: Optional[str] = None,
    ):
        """Upload a file in chunks; see ResumableUploader.upload."""
        from shock.upload import ResumableUploader

        uploader = ResumableUploader(self, owner=owner)
        return await uploader.upload(
            file,
            node_id=node_id,
            resume=resume,
            on_progress=on_progress,
            on_error=on_error,
            is_cancelled=is_cancelled,
        )
