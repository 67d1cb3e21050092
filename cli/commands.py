"""Command handler functions for CLI operations."""

from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    AclCommand,
    AttrsCommand,
    CommandRequest,
    ConfigCommand,
    DeleteCommand,
    LogoutCommand,
    NodeCommand,
    NodesCommand,
    RenameCommand,
    TokenCommand,
    UploadCommand,
)
from cli.config import Config, default_config_path
from cli.store_client import StoreClient

logger = get_logger(__name__)


_client: Optional[StoreClient] = None


def get_client() -> StoreClient:
    """
    Get or create global StoreClient instance.

    Returns:
        StoreClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new StoreClient instance")
        _client = StoreClient(Config(default_config_path()))
    return _client


def handle_token(cmd: TokenCommand, client: Optional[StoreClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.set_token(cmd.token)


def handle_logout(cmd: LogoutCommand, client: Optional[StoreClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.logout()


def handle_config(cmd: ConfigCommand, client: Optional[StoreClient] = None) -> str:
    """
    Handle 'config' command.

    Args:
        cmd: ConfigCommand; shows the configuration when key is None
        client: Optional StoreClient for dependency injection (testing)

    Returns:
        Configuration listing or confirmation message
    """
    if client is None:
        client = get_client()
    if cmd.key is None:
        return client.show_config()
    return client.set_config(cmd.key, cmd.value)


def handle_upload(cmd: UploadCommand, client: Optional[StoreClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with path, resume flag and optional node id
        client: Optional StoreClient for dependency injection (testing)

    Returns:
        Success, cancellation or error message
    """
    logger.info(f"Executing upload command: path={cmd.path} resume={cmd.resume} node_id={cmd.node_id}")
    if client is None:
        client = get_client()
    result = client.upload(cmd.path, resume=cmd.resume, node_id=cmd.node_id)
    logger.debug("Upload command completed")
    return result


def handle_node(cmd: NodeCommand, client: Optional[StoreClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.show_node(cmd.node_id)


def handle_nodes(cmd: NodesCommand, client: Optional[StoreClient] = None) -> str:
    """
    Handle 'nodes' command.

    Args:
        cmd: NodesCommand with attribute filters and paging options
        client: Optional StoreClient for dependency injection (testing)

    Returns:
        Formatted list of nodes
    """
    logger.info(f"Executing nodes command: filters={dict(cmd.filters)}")
    if client is None:
        client = get_client()
    return client.list_nodes(dict(cmd.filters), limit=cmd.limit, offset=cmd.offset, owner=cmd.owner)


def handle_acl(cmd: AclCommand, client: Optional[StoreClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.show_acl(cmd.node_id)


def handle_attrs(cmd: AttrsCommand, client: Optional[StoreClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.set_attributes(cmd.node_id, dict(cmd.attributes))


def handle_rename(cmd: RenameCommand, client: Optional[StoreClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.rename(cmd.node_id, cmd.file_name)


def handle_delete(cmd: DeleteCommand, client: Optional[StoreClient] = None) -> str:
    logger.info(f"Executing delete command: node_id={cmd.node_id}")
    if client is None:
        client = get_client()
    return client.delete(cmd.node_id)


HANDLERS = {
    TokenCommand: handle_token,
    LogoutCommand: handle_logout,
    ConfigCommand: handle_config,
    UploadCommand: handle_upload,
    NodeCommand: handle_node,
    NodesCommand: handle_nodes,
    AclCommand: handle_acl,
    AttrsCommand: handle_attrs,
    RenameCommand: handle_rename,
    DeleteCommand: handle_delete,
}


def dispatch_command(cmd_obj: CommandRequest, client: Optional[StoreClient] = None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj, client)
