"""Configuration loader for zone liveness checks.

This module handles loading configuration from files and environment variables,
with validation.
"""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .schema import (
    LivenessConfig,
    LoggingConfig,
    ProviderConfig,
    RecordConfig,
    ResolverConfig,
    RetryConfig,
    create_default_config,
)

ENV_PREFIX = "ZONE_LIVENESS_"

_TRUE_VALUES = ("true", "yes", "on", "1")
_FALSE_VALUES = ("false", "no", "off", "0")
_LIST_KEYS = ("primary_nameservers", "fallback_nameservers")
# Lists where an empty value means "unset"
_OPTIONAL_LIST_KEYS = ("primary_nameservers",)


class ConfigLoader:
    """Configuration loader merging defaults, a config file and the environment."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize configuration loader.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            environ: Environment mapping, defaults to ``os.environ``
        """
        self.config_file = config_file
        self.environ = os.environ if environ is None else environ
        self._config: Optional[LivenessConfig] = None

    def load_config(
        self, overrides: Optional[Dict[str, Any]] = None
    ) -> LivenessConfig:
        """Load configuration from file and environment variables.

        Args:
            overrides: Highest-priority values, e.g. from command line flags

        Returns:
            Loaded and validated configuration

        Raises:
            FileNotFoundError: If config file is specified but not found
            ValueError: If configuration is invalid
            yaml.YAMLError: If YAML parsing fails
            json.JSONDecodeError: If JSON parsing fails
        """
        config_dict = self._get_default_config_dict()

        if self.config_file:
            file_config = self._load_from_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        config_dict = self._apply_env_overrides(config_dict)

        if overrides:
            config_dict = self._merge_configs(config_dict, overrides)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def get_config(self) -> Optional[LivenessConfig]:
        """Get current configuration."""
        return self._config

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file.

        Args:
            file_path: Path to configuration file

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If file is not found
            ValueError: If file format is not supported
            yaml.YAMLError: If YAML parsing fails
            json.JSONDecodeError: If JSON parsing fails
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix.lower() in [".yaml", ".yml"]:
            result = yaml.safe_load(content)
            return result if isinstance(result, dict) else {}
        elif path.suffix.lower() == ".json":
            json_result = json.loads(content)
            return json_result if isinstance(json_result, dict) else {}
        else:
            # Try YAML first, then JSON
            try:
                result = yaml.safe_load(content)
                return result if isinstance(result, dict) else {}
            except yaml.YAMLError:
                try:
                    json_result = json.loads(content)
                    return json_result if isinstance(json_result, dict) else {}
                except json.JSONDecodeError:
                    raise ValueError(f"Unsupported file format: {file_path}")

    def _get_default_config_dict(self) -> Dict[str, Any]:
        """Get default configuration as dictionary."""
        return asdict(create_default_config())

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> LivenessConfig:
        """Convert dictionary to configuration object.

        Raises:
            ValueError: If configuration is invalid or has unknown keys
        """
        sections = {
            "provider": ProviderConfig,
            "record": RecordConfig,
            "retry": RetryConfig,
            "resolver": ResolverConfig,
            "logging": LoggingConfig,
        }

        unknown = set(config_dict) - set(sections) - {"zone_match"}
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

        built = {}
        for name, section_cls in sections.items():
            section = config_dict.get(name) or {}
            if not isinstance(section, dict):
                raise ValueError(f"Configuration section {name} must be a mapping")
            try:
                built[name] = section_cls(**section)
            except TypeError as e:
                raise ValueError(f"Invalid {name} configuration: {e}") from e

        return LivenessConfig(
            zone_match=config_dict.get("zone_match", "exact"),
            **built,
        )

    def _merge_configs(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Merge two configuration dictionaries.

        Args:
            base: Base configuration dictionary
            override: Override configuration dictionary

        Returns:
            Merged configuration dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration.

        Environment variables use the format ZONE_LIVENESS_<SECTION>_<KEY>,
        for example ZONE_LIVENESS_RETRY_MAX_ATTEMPTS=30. Top-level keys drop
        the section: ZONE_LIVENESS_ZONE_MATCH=substring.

        Args:
            config_dict: Base configuration dictionary

        Returns:
            Configuration dictionary with environment overrides applied
        """
        for env_key, env_value in self.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue

            key = env_key[len(ENV_PREFIX) :].lower()

            if key in config_dict and not isinstance(config_dict[key], dict):
                config_dict[key] = self._convert_env_value(env_value, config_dict[key])
                continue

            key_parts = key.split("_")
            if len(key_parts) < 2:
                continue

            section = key_parts[0]
            config_key = "_".join(key_parts[1:])

            if not isinstance(config_dict.get(section), dict):
                continue

            current = config_dict[section].get(config_key)
            config_dict[section][config_key] = self._convert_env_value(
                env_value, current, config_key
            )

        return config_dict

    def _convert_env_value(
        self, value: str, current: Any = None, key: Optional[str] = None
    ) -> Any:
        """Convert environment variable value to the type of the current value.

        Args:
            value: Environment variable value as string
            current: Value being overridden, used as a type hint
            key: Configuration key, used for list-valued keys that default to None

        Returns:
            Converted value
        """
        if isinstance(current, str):
            return value

        if isinstance(current, list) or key in _LIST_KEYS:
            items = [item.strip() for item in value.split(",") if item.strip()]
            if not items and key in _OPTIONAL_LIST_KEYS:
                return None
            return items

        if isinstance(current, bool) or current is None:
            if value.lower() in _TRUE_VALUES:
                return True
            elif value.lower() in _FALSE_VALUES:
                return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value


def load_config_from_file(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> LivenessConfig:
    """Convenience function to load configuration.

    Args:
        config_file: Path to configuration file
        overrides: Highest-priority configuration values

    Returns:
        Loaded configuration
    """
    return ConfigLoader(config_file).load_config(overrides)
