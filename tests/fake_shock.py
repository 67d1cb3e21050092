"""In-memory stand-in for the Shock node API, mounted through httpx.ASGITransport."""

import json
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


def envelope(data: Any, status_code: int = 200, error: Optional[list] = None) -> JSONResponse:
    return JSONResponse(
        {"status": status_code, "data": data, "error": error},
        status_code=status_code,
    )


class FakeShockStore:
    """
    Node store keeping attributes and uploaded parts in dictionaries.

    Attributes:
        nodes: node id -> node record as returned by the API
        parts: node id -> part number -> bytes
        requests: (method, path, query) for every request received
        part_writes: (node id, part number) for every accepted chunk
        fail_on_part: answer 500 when this part number is written
        fail_on_post: answer node creation with this status code
        post_without_id: answer node creation with a record lacking "id"
        ignore_filters: return every node from attribute searches
        required_token: reject requests without "OAuth <token>" when set
    """

    def __init__(self, required_token: Optional[str] = None, owner: str = "alice"):
        self.nodes: dict[str, dict] = {}
        self.parts: dict[str, dict[int, bytes]] = {}
        self.requests: list[tuple[str, str, str]] = []
        self.part_writes: list[tuple[str, int]] = []
        self.fail_on_part: Optional[int] = None
        self.fail_on_post: Optional[int] = None
        self.post_without_id = False
        self.ignore_filters = False
        self.required_token = required_token
        self.owner = owner
        self.app = self._build_app()

    def add_node(self, attributes: Optional[dict], parts: Optional[dict[int, bytes]] = None) -> str:
        node_id = str(uuid.uuid4())
        self.nodes[node_id] = {
            "id": node_id,
            "attributes": attributes,
            "file": {"name": "", "size": 0},
        }
        self.parts[node_id] = dict(parts or {})
        self._refresh_size(node_id)
        return node_id

    def content(self, node_id: str) -> bytes:
        return b"".join(data for _, data in sorted(self.parts[node_id].items()))

    def requests_for(self, method: str) -> list[tuple[str, str, str]]:
        return [r for r in self.requests if r[0] == method]

    def _refresh_size(self, node_id: str) -> None:
        self.nodes[node_id]["file"]["size"] = len(self.content(node_id))

    def _unauthorized(self, request: Request) -> Optional[JSONResponse]:
        if self.required_token is None:
            return None
        if request.headers.get("authorization") != f"OAuth {self.required_token}":
            return envelope(None, 401, ["Unauthorized"])
        return None

    def _build_app(self) -> FastAPI:
        app = FastAPI()
        store = self

        @app.middleware("http")
        async def record(request: Request, call_next):
            store.requests.append((request.method, request.url.path, request.url.query))
            denied = store._unauthorized(request)
            if denied is not None:
                return denied
            return await call_next(request)

        @app.get("/node")
        async def list_nodes(request: Request):
            params = dict(request.query_params)
            limit = int(params.pop("limit", 0) or 0)
            offset = int(params.pop("offset", 0) or 0)
            owner = params.pop("owner", None)
            if owner is not None and owner != store.owner:
                return envelope([])

            if store.ignore_filters:
                matches = list(store.nodes.values())
            elif "query" in params:
                params.pop("query")
                matches = [
                    node for node in store.nodes.values()
                    if all(str((node["attributes"] or {}).get(k)) == v for k, v in params.items())
                ]
            elif "querynode" in params:
                params.pop("querynode")
                matches = [
                    node for node in store.nodes.values()
                    if all(str(node.get(k)) == v for k, v in params.items())
                ]
            else:
                matches = list(store.nodes.values())

            matches = matches[offset:]
            if limit:
                matches = matches[:limit]
            return envelope(matches)

        @app.post("/node")
        async def create_node(request: Request):
            if store.fail_on_post is not None:
                return envelope(None, store.fail_on_post, ["Failed to create node"])
            if store.post_without_id:
                return envelope({"attributes": None})
            form = await request.form()
            attributes = None
            if "attributes" in form:
                attributes = json.loads(await form["attributes"].read())
            node_id = store.add_node(attributes)
            store.nodes[node_id]["parts"] = {"count": int(form.get("parts", 0))}
            return envelope(store.nodes[node_id])

        @app.get("/node/{node_id}")
        async def get_node(node_id: str):
            if node_id not in store.nodes:
                return envelope(None, 404, ["Node not found"])
            return envelope(store.nodes[node_id])

        @app.get("/node/{node_id}/acl")
        async def get_acl(node_id: str):
            if node_id not in store.nodes:
                return envelope(None, 404, ["Node not found"])
            users = [store.owner]
            return envelope({"owner": store.owner, "read": users, "write": users, "delete": users})

        @app.put("/node/{node_id}")
        async def update_node(node_id: str, request: Request):
            if node_id not in store.nodes:
                return envelope(None, 404, ["Node not found"])
            form = await request.form()
            node = store.nodes[node_id]

            for key, value in form.multi_items():
                if key.isdigit():
                    part = int(key)
                    if store.fail_on_part == part:
                        return envelope(None, 500, [f"Failed to store part {part}"])
                    store.parts[node_id][part] = await value.read()
                    store.part_writes.append((node_id, part))
                elif key == "attributes":
                    node["attributes"] = json.loads(await value.read())
                elif key == "file_name":
                    node["file"]["name"] = value

            store._refresh_size(node_id)
            return envelope(node)

        @app.delete("/node/{node_id}")
        async def delete_node(node_id: str):
            if node_id not in store.nodes:
                return envelope(None, 404, ["Node not found"])
            del store.nodes[node_id]
            del store.parts[node_id]
            return envelope(None)

        return app
