"""Command parser for CLI input."""

import shlex

from cli.constants import CONFIG_KEYS
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


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], tokens[1:]
    parser = _PARSERS.get(command_name)
    if parser is None:
        raise ParseError(f"Unknown command: {command_name}")
    return parser(args)


def _single_node_id(name: str, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError(f"{name} requires exactly 1 argument: <node_id>")
    return args[0]


def _parse_token(args: list[str]) -> TokenCommand:
    """Parse 'token <token>' command."""
    if len(args) != 1:
        raise ParseError("token requires exactly 1 argument: <token>")
    return TokenCommand(token=args[0])


def _parse_logout(args: list[str]) -> LogoutCommand:
    if args:
        raise ParseError("logout takes no arguments")
    return LogoutCommand()


def _parse_config(args: list[str]) -> ConfigCommand:
    """Parse 'config [<key> <value>]' command."""
    if not args:
        return ConfigCommand()
    if len(args) != 2:
        raise ParseError("config requires either no arguments or <key> <value>")
    key, value = args
    if key not in CONFIG_KEYS:
        raise ParseError(f"Unknown config key: {key} (expected one of {', '.join(CONFIG_KEYS)})")
    return ConfigCommand(key=key, value=value)


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [--resume] [--node <id>]' command."""
    path = None
    resume = False
    node_id = None

    remaining = list(args)
    while remaining:
        arg = remaining.pop(0)
        if arg == "--resume":
            resume = True
        elif arg == "--node":
            if not remaining:
                raise ParseError("--node requires a node id")
            node_id = remaining.pop(0)
        elif arg.startswith("--"):
            raise ParseError(f"Unknown option for upload: {arg}")
        elif path is None:
            path = arg
        else:
            raise ParseError("upload accepts a single file path")

    if path is None:
        raise ParseError("upload requires a file path")

    return UploadCommand(path=path, resume=resume, node_id=node_id)


def _parse_node(args: list[str]) -> NodeCommand:
    return NodeCommand(node_id=_single_node_id("node", args))


def _parse_int_option(option: str, value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ParseError(f"{option} requires an integer, got '{value}'")
    if number < 0:
        raise ParseError(f"{option} must not be negative")
    return number


def _parse_pairs(args: list[str]) -> tuple[tuple[str, str], ...]:
    pairs = []
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or not key:
            raise ParseError(f"Expected key=value, got '{arg}'")
        pairs.append((key, value))
    return tuple(pairs)


def _parse_nodes(args: list[str]) -> NodesCommand:
    """Parse 'nodes [key=value ...] [--limit N] [--offset N] [--owner NAME]' command."""
    filters = []
    options: dict = {}

    remaining = list(args)
    while remaining:
        arg = remaining.pop(0)
        if arg in ("--limit", "--offset", "--owner"):
            if not remaining:
                raise ParseError(f"{arg} requires a value")
            value = remaining.pop(0)
            if arg == "--owner":
                options["owner"] = value
            else:
                options[arg[2:]] = _parse_int_option(arg, value)
        elif arg.startswith("--"):
            raise ParseError(f"Unknown option for nodes: {arg}")
        else:
            filters.append(arg)

    return NodesCommand(filters=_parse_pairs(filters), **options)


def _parse_acl(args: list[str]) -> AclCommand:
    return AclCommand(node_id=_single_node_id("acl", args))


def _parse_attrs(args: list[str]) -> AttrsCommand:
    """Parse 'attrs <id> key=value [key=value ...]' command."""
    if len(args) < 2:
        raise ParseError("attrs requires a node id and at least one key=value pair")
    return AttrsCommand(node_id=args[0], attributes=_parse_pairs(args[1:]))


def _parse_rename(args: list[str]) -> RenameCommand:
    """Parse 'rename <id> <file_name>' command."""
    if len(args) != 2:
        raise ParseError("rename requires exactly 2 arguments: <node_id> <file_name>")
    node_id, file_name = args
    return RenameCommand(node_id=node_id, file_name=file_name)


def _parse_delete(args: list[str]) -> DeleteCommand:
    return DeleteCommand(node_id=_single_node_id("delete", args))


_PARSERS = {
    "token": _parse_token,
    "logout": _parse_logout,
    "config": _parse_config,
    "upload": _parse_upload,
    "node": _parse_node,
    "nodes": _parse_nodes,
    "acl": _parse_acl,
    "attrs": _parse_attrs,
    "rename": _parse_rename,
    "delete": _parse_delete,
}
