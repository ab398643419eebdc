"""Configuration management for the dry-run store."""

from . import settings
from .factory import ConfiguredComponentFactory
from .schema import DryRunStoreConfig
from .settings import ConfigManager

__all__ = [
    "ConfigManager",
    "ConfiguredComponentFactory",
    "DryRunStoreConfig",
    "get_config",
    "reload_config",
    "get_database_path",
    "get_log_config",
]


def get_config() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        ConfigManager: Global configuration instance
    """
    return settings.config


def reload_config() -> ConfigManager:
    """
    Reload configuration from files and environment variables.

    Components built afterwards by ``ConfiguredComponentFactory()`` see the new values.
    """
    settings.config = ConfigManager()
    return settings.config


def get_database_path() -> str:
    """Get the database file path for the current environment."""
    return get_config().get("database.connection.database_path", "./db/database.sqlite")


def get_log_config() -> dict:
    """
    Get logging configuration suitable for Python's logging.dictConfig().

    Returns:
        Logging configuration dictionary
    """
    log_config = get_config().get_section("logging")
    level = log_config.get("level", "INFO")
    handler_configs = log_config.get("handlers") or {}

    handlers = {}
    root_handlers = []

    if (handler_configs.get("console") or {}).get("enabled", True):
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "default",
            "stream": "ext://sys.stderr",
        }
        root_handlers.append("console")

    file_config = handler_configs.get("file") or {}
    if file_config.get("enabled", False):
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "default",
            "filename": file_config.get("path") or "./logs/dryrun_store.log",
            "maxBytes": _parse_size(file_config.get("max_size") or "10MB"),
            "backupCount": file_config.get("backup_count") or 5,
        }
        root_handlers.append("file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            }
        },
        "handlers": handlers,
        "root": {"level": level, "handlers": root_handlers},
    }


def _parse_size(size_str: str) -> int:
    """
    Parse size string to bytes.

    Args:
        size_str: Size string like "10MB", "1GB"

    Returns:
        Size in bytes
    """
    size_str = str(size_str).strip().upper()
    multipliers = {
        'GB': 1024 * 1024 * 1024,
        'MB': 1024 * 1024,
        'KB': 1024,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            return int(float(size_str[:-len(suffix)]) * multiplier)

    # Default to bytes if no suffix
    return int(size_str)
