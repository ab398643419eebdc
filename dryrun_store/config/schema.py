"""Configuration validation schemas using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DatabaseConnectionConfig(BaseModel):
    """Database connection configuration."""

    database_path: str = Field("./db/database.sqlite", description="Path to the SQLite database file")
    foreign_keys: bool = Field(True, description="Enable foreign key enforcement per connection")
    timeout: float = Field(5.0, ge=0, description="Seconds to wait on a locked database")

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v):
        if not v:
            raise ValueError("database_path cannot be empty")
        return v


class DatabaseConfig(BaseModel):
    """Complete database configuration."""

    type: str = Field("sqlite", description="Database type")
    connection: DatabaseConnectionConfig = Field(default_factory=DatabaseConnectionConfig)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v.lower() != "sqlite":
            raise ValueError("only the sqlite database type is supported")
        return v.lower()


class LogHandlerConfig(BaseModel):
    """Log handler configuration."""

    enabled: bool = Field(True, description="Enable handler")
    path: str | None = Field(None, description="Log file path")
    max_size: str | None = Field(None, description="Maximum log file size")
    backup_count: int | None = Field(None, description="Number of backup files")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format"
    )
    handlers: dict[str, LogHandlerConfig] = Field(default_factory=dict)

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log level must be one of {valid_levels}")
        return v.upper()


class ApplicationConfig(BaseModel):
    """Application-level configuration."""

    name: str = Field("Dry-run Store", description="Application name")
    version: str = Field("0.1.0", description="Application version")
    environment: str = Field("development", description="Environment name")
    debug: bool = Field(False, description="Debug mode")


class DryRunStoreConfig(BaseModel):
    """Complete configuration schema."""

    model_config = ConfigDict(extra="allow")

    application: ApplicationConfig
    database: DatabaseConfig
    logging: LoggingConfig


def validate_config(config_dict: dict) -> DryRunStoreConfig:
    """
    Validate configuration dictionary against schema.

    Args:
        config_dict: Configuration dictionary to validate

    Returns:
        Validated configuration object

    Raises:
        ValidationError: If configuration is invalid
    """
    return DryRunStoreConfig(**config_dict)
