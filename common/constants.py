"""Project-wide constants (chunk size, config paths, request defaults)."""

DEFAULT_CHUNK_SIZE_BYTES: int = 2 * 1024 * 1024  # 2 MiB, matches the store's browser uploader

DEFAULT_TIMEOUT_SECONDS: int = 30

AUTH_SCHEME: str = "OAuth"

NODE_ENDPOINT: str = "node"
ACL_ENDPOINT: str = "acl"

CONFIG_DIR_NAME: str = ".shock"
CONFIG_FILE_NAME: str = "config.json"
