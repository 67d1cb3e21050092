"""Configuration management for the Shock CLI."""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Optional

from common.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CHUNK_SIZE_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
)
from common.logging_config import get_logger

logger = get_logger(__name__)


def default_config_path() -> Path:
    """Config file location, ~/.shock/config.json unless SHOCK_CONFIG is set."""
    override = os.environ.get("SHOCK_CONFIG")
    if override:
        return Path(override)
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


class Config:
    """Key-value CLI configuration persisted as a JSON file."""

    NUMERIC_KEYS = ("chunk_size", "timeout")

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.shock/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    @staticmethod
    def defaults() -> dict:
        return {
            "shock_url": os.environ.get("SHOCK_URL"),
            "token": os.environ.get("SHOCK_TOKEN"),
            "chunk_size": DEFAULT_CHUNK_SIZE_BYTES,
            "timeout": DEFAULT_TIMEOUT_SECONDS,
        }

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / CONFIG_DIR_NAME / CONFIG_FILE_NAME
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = self.defaults()
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("config root must be an object")
            except (ValueError, IOError) as e:
                backup_path = self.config_path.with_suffix('.json.bak')
                logger.warning(f"Unreadable config {self.config_path} ({e}); backing up to {backup_path}")
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    logger.warning(f"Could not back up {self.config_path}")
                return config
            config.update({k: v for k, v in data.items() if v is not None})
            return config

        self._write(config)
        return config

    def _write(self, data: dict) -> None:
        try:
            with open(self.config_path, 'w') as f:
                json.dump(data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write config {self.config_path}: {e}")

    def save(self) -> None:
        """Save current configuration to file."""
        self._write(self.data)

    def get(self, key: str, default: Any = None) -> Any:
        value = self.data.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """
        Set a value and save to file. Numeric keys are converted to int.

        Raises:
            ValueError: If a numeric key gets a non-numeric value
        """
        if key in self.NUMERIC_KEYS and value is not None:
            value = int(value)
        self.data[key] = value
        self.save()

    def get_token(self) -> Optional[str]:
        return self.data.get('token')

    def set_token(self, token: Optional[str]) -> None:
        self.set('token', token)

    def get_shock_url(self) -> Optional[str]:
        return self.data.get('shock_url')
