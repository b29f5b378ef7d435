"""
Configuration loader for httpreq.

This module handles loading configuration from configuration files and
environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .models import GlobalConfig


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    def __init__(self) -> None:
        """Initialize configuration loader."""
        self.config_paths = [
            Path("httpreq.yaml"),
            Path("httpreq.yml"),
            Path("httpreq.json"),
            Path("config/httpreq.yaml"),
            Path("config/httpreq.yml"),
            Path("config/httpreq.json"),
            Path.home() / ".httpreq" / "config.yaml",
            Path.home() / ".httpreq" / "config.yml",
            Path.home() / ".httpreq" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = "HTTPREQ_"

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
        """
        Load configuration from all available sources.

        Later sources win: defaults, then the config file, then environment
        variables.

        Args:
            config_file: Specific config file to load

        Returns:
            GlobalConfig instance with merged configuration
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        return GlobalConfig(**config_data)

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ValueError(f"Config file not found: {config_path}")
            return self._parse_config_file(config_path)

        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix in (".yaml", ".yml"):
                    return yaml.safe_load(f) or {}
                elif suffix == ".json":
                    return json.load(f) or {}
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}") from e

        raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            # Engine
            f"{self.env_prefix}MAX_REDIRECTS": ("engine", "default_max_redirects"),
            f"{self.env_prefix}TIMEOUT": ("engine", "default_timeout"),
            f"{self.env_prefix}CHUNK_SIZE": ("engine", "chunk_size"),
            f"{self.env_prefix}USER_AGENT": ("engine", "user_agent"),
            f"{self.env_prefix}VERIFY_SSL": ("engine", "verify_ssl"),
        }

        # Free-form strings are taken verbatim
        text_vars = {
            f"{self.env_prefix}LOG_FILE",
            f"{self.env_prefix}LOG_FORMAT",
            f"{self.env_prefix}USER_AGENT",
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                converted_value = (
                    value if env_var in text_vars else self._convert_env_value(value)
                )

                current = config
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = converted_value

        # A log file given through the environment implies file logging
        if "file_path" in config.get("logging", {}):
            config["logging"]["enable_file"] = True

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def save_config(self, config: GlobalConfig, config_file: Union[str, Path]) -> None:
        """Save configuration to a YAML or JSON file."""
        config_path = Path(config_file)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_data = config.model_dump(mode="json")

        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        with open(config_path, "w", encoding="utf-8") as f:
            if suffix == ".json":
                json.dump(config_data, f, indent=2)
            else:
                yaml.safe_dump(config_data, f, default_flow_style=False, indent=2)
