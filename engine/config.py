"""
Configuration manager for the Oathplate calculator.

Handles loading and managing application configuration from YAML files.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml
from engine.models import CRAFTED_SLOTS, DEFAULT_CRAFTED, SHALE_ID, SHARD_ID
from utils.paths import CACHE_PATH, CONFIG_PATH


class ConfigError(Exception):
    """Raised when the configuration file exists but cannot be used."""


class ConfigManager:
    """Manages application configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager."""
        self.logger = logging.getLogger(__name__)

        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = CONFIG_PATH

        self._config = None

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            self.logger.warning(f"Config file not found at {self.config_path}, using defaults")
            self._config = self.get_default_config()
            return self._config

        try:
            with self.config_path.open('r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to load configuration: {e}")
            raise ConfigError(f"cannot read {self.config_path}: {e}") from e

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping")

        # Merge with defaults to ensure all required keys exist
        self._config = self._merge_configs(self.get_default_config(), config)
        self.logger.info(f"Configuration loaded from {self.config_path}")

        return self._config

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)."""
        config = self.get_config()

        keys = key.split('.')
        value = config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any):
        """Set configuration value by key (supports dot notation)."""
        config = self.get_config()

        keys = key.split('.')
        current = config

        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def save_config(self, config: Optional[Dict[str, Any]] = None, config_path: Optional[str] = None):
        """Save configuration to YAML file."""
        if config is not None:
            self._config = config

        if not self._config:
            self.logger.warning("No configuration to save")
            return

        save_path = Path(config_path) if config_path else self.config_path

        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = save_path.with_suffix(save_path.suffix + ".tmp")
            with open(tmp_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, save_path)

            self.logger.info(f"Configuration saved to {save_path}")

        except Exception as e:
            self.logger.error(f"Failed to save configuration: {e}")
            raise

    def get_default_config(self) -> Dict[str, Any]:
        """Return default configuration values."""
        return {
            'api': {
                'base_url': "https://prices.runescape.wiki/api/v1/osrs",
                'timeout_seconds': 10,
                'user_agent': "oathplate-calculator/1.0 (manual refresh)",
            },
            'items': {
                'ingredient_a': {'name': "Infernal shale", 'id': SHALE_ID},
                'ingredient_b': {'name': "Oathplate shards", 'id': SHARD_ID},
                'crafted': [{'name': name, 'id': item_id} for name, item_id in DEFAULT_CRAFTED],
            },
            'cache': {
                'path': str(CACHE_PATH),
            },
            'app': {
                'name': "Oathplate Calculator",
                'version': "1.0.0",
            },
            'logging': {
                'level': "INFO",
            },
            'ui': {
                'window_width': 1100,
                'window_height': 700,
            },
        }

    def _merge_configs(self, default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """Merge user configuration with defaults."""
        result = copy.deepcopy(default)

        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def get_items_config(self) -> Dict[str, Any]:
        """Get ingredient and crafted item names and ids."""
        return self.get('items', {})

    def get_crafted_items(self) -> List[tuple]:
        """Return ``(name, item_id)`` pairs for the crafted item slots."""
        return [(entry['name'], int(entry['id'])) for entry in self.get('items.crafted', [])]

    def get_cache_path(self) -> Path:
        return Path(self.get('cache.path', str(CACHE_PATH)))

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        config = self.get_config()

        for section in ('api', 'items', 'cache'):
            if section not in config:
                errors.append(f"Missing required section: {section}")

        if not self.get('api.base_url'):
            errors.append("API base_url not configured")

        timeout = self.get('api.timeout_seconds', 0)
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            errors.append("API timeout_seconds must be a positive number")

        for key in ('ingredient_a', 'ingredient_b'):
            entry = self.get(f'items.{key}')
            if not isinstance(entry, dict) or not entry.get('id'):
                errors.append(f"Item {key} needs an id")

        crafted = self.get('items.crafted', [])
        if not isinstance(crafted, list) or len(crafted) != CRAFTED_SLOTS:
            errors.append(f"items.crafted must list exactly {CRAFTED_SLOTS} items")
        else:
            for i, entry in enumerate(crafted, start=1):
                if not isinstance(entry, dict) or not entry.get('name') or not entry.get('id'):
                    errors.append(f"Crafted item {i} needs a name and an id")

        return errors
