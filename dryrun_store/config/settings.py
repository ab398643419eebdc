"""Layered YAML configuration for the dry-run store.

Values are resolved in three layers, later layers winning:

1. ``defaults/base.yaml``
2. ``defaults/<environment>.yaml`` where the environment comes from
   ``DRYRUN_STORE_ENVIRONMENT`` or ``application.environment``
3. ``DRYRUN_STORE_*`` environment variables
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "development"

# Variable suffixes that map onto keys containing underscores
_ENV_PATH_ALIASES = {
    "database_path": ["database", "connection", "database_path"],
    "database_foreign_keys": ["database", "connection", "foreign_keys"],
    "database_timeout": ["database", "connection", "timeout"],
    "log_level": ["logging", "level"],
}


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of {path.name} must be a mapping")
    return data


def _merge_into(target: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overlay.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value)
        else:
            target[key] = value
    return target


class ConfigManager:
    """Loads the layered configuration once and serves dot-notation lookups."""

    def __init__(self, config_dir: Optional[Path] = None, env_prefix: str = "DRYRUN_STORE"):
        """Initialize configuration manager.

        Args:
            config_dir: Directory holding ``base.yaml`` and the per-environment
                files. Defaults to the packaged ``defaults`` directory.
            env_prefix: Prefix shared by all override variables.
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent / "defaults"
        self.env_prefix = env_prefix
        self._config: Optional[Dict[str, Any]] = None

        # Fail at construction time rather than on first lookup
        self.load_config()

    def load_config(self) -> Dict[str, Any]:
        """Resolve all layers, caching the result."""
        if self._config is not None:
            return self._config

        try:
            data = self._load_base_config()
            environment = self._select_environment(data)
            self._merge_environment_file(data, environment)
            self._apply_env_overrides(data)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Configuration loading failed: {e}") from e

        self._config = data
        logger.info(f"Configuration loaded for environment: {environment}")
        return data

    def _load_base_config(self) -> Dict[str, Any]:
        base_file = self.config_dir / "base.yaml"
        if not base_file.is_file():
            logger.error(f"Base configuration file not found: {base_file}")
            raise ConfigurationError(f"Base configuration file not found: {base_file}")
        try:
            return _read_yaml(base_file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in base config file: {e}") from e

    def _select_environment(self, data: Dict[str, Any]) -> str:
        application = data.setdefault("application", {})
        environment = os.environ.get(
            f"{self.env_prefix}_ENVIRONMENT",
            application.get("environment", DEFAULT_ENVIRONMENT),
        )
        application["environment"] = environment
        return environment

    def _merge_environment_file(self, data: Dict[str, Any], environment: str) -> None:
        env_file = self.config_dir / f"{environment}.yaml"
        if not env_file.is_file():
            logger.debug(f"No configuration file for environment '{environment}'")
            return

        try:
            _merge_into(data, _read_yaml(env_file))
        except yaml.YAMLError as e:
            # A broken overlay falls back to the base layer
            logger.warning(f"Ignoring invalid YAML in {env_file.name}: {e}")
            return
        logger.debug(f"Merged {env_file.name}")

    def _override_path(self, variable: str) -> Optional[List[str]]:
        prefix = f"{self.env_prefix}_"
        if not variable.startswith(prefix):
            return None
        key = variable[len(prefix):].lower()
        if key == "environment":
            return None
        return _ENV_PATH_ALIASES.get(key, key.split("_"))

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        applied = 0
        for variable, raw_value in os.environ.items():
            path = self._override_path(variable)
            if path is None:
                continue
            try:
                self._set_nested_value(data, path, self._parse_env_value(raw_value))
            except ConfigurationError as e:
                logger.warning(f"Skipping override {variable}: {e}")
                continue
            applied += 1
            logger.debug(f"Override {'.'.join(path)} from {variable}")

        if applied:
            logger.info(f"Applied {applied} environment variable overrides")

    def _parse_env_value(self, value: str) -> Any:
        """Turn an environment string into None, bool, int, float or str."""
        lowered = value.strip().lower()
        if lowered in ("", "null", "none"):
            return None
        if lowered in ("true", "false"):
            return lowered == "true"
        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                continue
        return value

    def _set_nested_value(self, data: Dict[str, Any], path: List[str], value: Any) -> None:
        node = data
        for key in path[:-1]:
            child = node.setdefault(key, {})
            if not isinstance(child, dict):
                raise ConfigurationError(f"Cannot set nested value below '{key}'")
            node = child
        node[path[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dot-notation key, returning ``default`` when absent or null."""
        node: Any = self.load_config()
        for part in key.split("."):
            if not isinstance(node, dict) or node.get(part) is None:
                return default
            node = node[part]
        return node

    def get_section(self, section: str) -> Dict[str, Any]:
        value = self.get(section)
        return value if isinstance(value, dict) else {}

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, value: Any) -> None:
        """Set a value in the loaded configuration, creating sections as needed."""
        self._set_nested_value(self.load_config(), key.split("."), value)

    def get_all(self) -> Dict[str, Any]:
        return self.load_config().copy()

    def get_environment(self) -> str:
        return self.get("application.environment", DEFAULT_ENVIRONMENT)

    def is_debug(self) -> bool:
        return bool(self.get("application.debug", False))

    def is_production(self) -> bool:
        return self.get_environment().lower() == "production"

    def is_testing(self) -> bool:
        return self.get_environment().lower() == "testing"


# Global configuration instance
config = ConfigManager()
