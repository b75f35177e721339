"""Configuration management for the ChunkDrive CLI."""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple

from common.logging_config import get_logger

logger = get_logger(__name__)


class Config:
    """Manages CLI configuration stored in a JSON file."""

    DEFAULT_CONFIG = {
        "gateway_host": os.environ.get("CHUNKDRIVE_HOST", "localhost"),
        "gateway_port": int(os.environ.get("CHUNKDRIVE_PORT", "8080")),
        "timeout": 30,
        "max_retries": 3,
        "retry_backoff_multiplier": 2,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.chunkdrive/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.chunkdrive' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = self.DEFAULT_CONFIG.copy()

        if not self.config_path.exists():
            self._write(config)
            return config

        try:
            with open(self.config_path, 'r') as f:
                config.update(json.load(f))
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
            return self.DEFAULT_CONFIG.copy()
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

    def get_credentials(self) -> Optional[Tuple[str, str]]:
        """
        Get stored Basic Auth credentials.

        Returns:
            (username, password) or None if not set
        """
        username = self.data.get('username')
        password = self.data.get('password')
        if username and password:
            return username, password
        return None

    def set_credentials(self, username: str, password: str) -> None:
        """
        Set Basic Auth credentials and save to file.

        Args:
            username: Operator username
            password: Operator password
        """
        self.data['username'] = username
        self.data['password'] = password
        self.save()

    def get_base_url(self) -> str:
        """
        Get gateway base URL.

        Returns:
            Base URL string (e.g., "http://localhost:8080")
        """
        host = self.data.get('gateway_host', 'localhost')
        port = self.data.get('gateway_port', 8080)
        return f"http://{host}:{port}"

    def get_timeout(self) -> int:
        return self.data.get('timeout', 30)

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries' and 'retry_backoff_multiplier'
        """
        return {
            'max_retries': self.data.get('max_retries', 3),
            'retry_backoff_multiplier': self.data.get('retry_backoff_multiplier', 2),
        }
