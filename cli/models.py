"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class TokenCommand:
    """Store an OAuth token."""

    token: str
    command: Literal["token"] = "token"


@dataclass(frozen=True)
class LogoutCommand:
    """Forget the stored token."""

    command: Literal["logout"] = "logout"


@dataclass(frozen=True)
class ConfigCommand:
    """Show configuration, or set one key when key and value are given."""

    key: str | None = None
    value: str | None = None
    command: Literal["config"] = "config"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file, optionally resuming an earlier attempt."""

    path: str
    resume: bool = False
    node_id: str | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class NodeCommand:
    """Show one node."""

    node_id: str
    command: Literal["node"] = "node"


@dataclass(frozen=True)
class NodesCommand:
    """Search nodes by attribute."""

    filters: tuple[tuple[str, str], ...] = ()
    limit: int | None = None
    offset: int | None = None
    owner: str | None = None
    command: Literal["nodes"] = "nodes"


@dataclass(frozen=True)
class AclCommand:
    """Show a node's access control lists."""

    node_id: str
    command: Literal["acl"] = "acl"


@dataclass(frozen=True)
class AttrsCommand:
    """Replace a node's attributes."""

    node_id: str
    attributes: tuple[tuple[str, str], ...]
    command: Literal["attrs"] = "attrs"


@dataclass(frozen=True)
class RenameCommand:
    """Change the file name stored on a node."""

    node_id: str
    file_name: str
    command: Literal["rename"] = "rename"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete a node."""

    node_id: str
    command: Literal["delete"] = "delete"


CommandRequest = (
    TokenCommand
    | LogoutCommand
    | ConfigCommand
    | UploadCommand
    | NodeCommand
    | NodesCommand
    | AclCommand
    | AttrsCommand
    | RenameCommand
    | DeleteCommand
)
