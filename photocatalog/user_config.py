"""
User configuration management for Photo Catalog.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. Environment variables
3. User config file (~/.photocatalog/config.json)
4. Default values from config.py (lowest priority)

Configuration file location: ~/.photocatalog/config.json

Example config.json:
{
    "db_file": "~/Pictures/photo_db.json",
    "recursive_scan": true,
    "prefer_exif_timestamp": true,
    "show_progress": true
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import DEFAULT_DB_FILENAME

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    Attributes are lazy-loaded and cached for performance.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        # Check environment variable first
        env_dir = os.getenv('PHOTOCATALOG_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)

        # Default to ~/.photocatalog/
        return Path.home() / '.photocatalog'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        # Check environment variable first
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Try to parse as JSON for complex types
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        # Check config file
        config_data = self._get_config_data()
        if key in config_data:
            return config_data[key]

        # Return default
        return default

    def get_bool(self, key: str, default: bool, env_var: Optional[str] = None) -> bool:
        """Get a boolean setting; accepts true/false, yes/no, on/off and 1/0."""
        value = self.get(key, default=default, env_var=env_var)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ('1', 'true', 'yes', 'on'):
                return True
            if lowered in ('0', 'false', 'no', 'off'):
                return False
            logger.warning(f"Ignoring invalid value for {key}: {value!r}")
            return default
        return bool(value)

    @property
    def db_file(self) -> str:
        """Catalog file opened when none is given on the command line."""
        custom = self.get('db_file', env_var='PHOTOCATALOG_DB_FILE')
        if custom:
            return str(custom)
        return DEFAULT_DB_FILENAME

    @property
    def recursive_scan(self) -> bool:
        """Whether ADD descends into subdirectories without -r."""
        return self.get_bool('recursive_scan', default=False, env_var='PHOTOCATALOG_RECURSIVE')

    @property
    def prefer_exif_timestamp(self) -> bool:
        """Use the EXIF capture time instead of the file modification time."""
        return self.get_bool('prefer_exif_timestamp', default=True, env_var='PHOTOCATALOG_EXIF_TIMESTAMP')

    @property
    def show_progress(self) -> bool:
        """Show progress bars (when tqdm is installed)."""
        return self.get_bool('show_progress', default=True, env_var='PHOTOCATALOG_SHOW_PROGRESS')

    def create_example_config(self):
        """Create an example configuration file."""
        example_config = {
            "_comment": "Photo Catalog User Configuration",
            "db_file": None,
            "recursive_scan": False,
            "prefer_exif_timestamp": True,
            "show_progress": True,
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            self.reload()
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
