"""
Configuration-based factory for creating application components.

This module wires the transaction runner, repositories, schema manager and
resource services from the centralized configuration system.
"""

import logging
from typing import Any, Dict, Optional

from ..domain.exceptions import DomainError
from .schema import DatabaseConfig, DryRunStoreConfig, validate_config
from . import settings


class ConfigurationError(DomainError):
    """Raised when configuration is invalid or missing."""
    pass


class ConfiguredComponentFactory:
    """
    Factory for creating application components with configuration injection.

    All components share the validated database section, so every
    simulated transaction opens its connection with the same path,
    busy timeout and foreign key setting.
    """

    def __init__(self, config_manager=None):
        """
        Initialize the factory with configuration.

        Args:
            config_manager: Configuration manager instance (uses global if None)
        """
        self.config_manager = config_manager or settings.config
        self._logger = logging.getLogger(__name__)
        self._validated_config: Optional[DryRunStoreConfig] = None
        self._validate_configuration()

    def _validate_configuration(self) -> None:
        """Validate the complete configuration against schema."""
        try:
            config_dict = self.config_manager.get_all()
            self._validated_config = validate_config(config_dict)
            self._logger.info("Configuration validation successful")
        except Exception as e:
            self._logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @property
    def validated_config(self) -> DryRunStoreConfig:
        """Get validated configuration object."""
        if self._validated_config is None:
            raise ConfigurationError("Configuration not validated")
        return self._validated_config

    def get_database_config(self) -> DatabaseConfig:
        """Get database configuration section."""
        return self.validated_config.database

    @property
    def database_path(self) -> str:
        return self.get_database_config().connection.database_path

    def create_transaction_runner(self):
        """
        Create the simulated transaction runner for the configured database.

        Returns:
            Configured SQLiteTransactionRunner instance
        """
        from ..infrastructure.sqlite import SQLiteTransactionRunner

        connection_config = self.get_database_config().connection
        self._logger.info(f"Creating transaction runner with database: {connection_config.database_path}")

        return SQLiteTransactionRunner(connection_config.database_path, config=connection_config)

    def create_resource_repository(self, transaction_runner=None):
        """Create the generic resource repository."""
        from ..infrastructure.sqlite import SQLiteResourceRepository

        return SQLiteResourceRepository(transaction_runner or self.create_transaction_runner())

    def create_purchase_repository(self, transaction_runner=None):
        """Create the purchase repository."""
        from ..infrastructure.sqlite import SQLitePurchaseRepository

        return SQLitePurchaseRepository(transaction_runner or self.create_transaction_runner())

    def create_schema_manager(self):
        """
        Create the schema manager used to bootstrap the database.

        Returns:
            Configured SQLiteSchemaManager instance
        """
        from ..infrastructure.sqlite import SQLiteSchemaManager

        connection_config = self.get_database_config().connection
        return SQLiteSchemaManager(connection_config.database_path, config=connection_config)

    def create_resource_services(self) -> Dict[str, Any]:
        """
        Build one service per table, sharing a single transaction runner.

        Returns:
            Dictionary of services keyed by table name
        """
        from ..application.services import create_resource_services

        transaction_runner = self.create_transaction_runner()
        services = create_resource_services(
            self.create_resource_repository(transaction_runner),
            self.create_purchase_repository(transaction_runner),
        )
        self._logger.info(f"Created resource services: {', '.join(sorted(services))}")
        return services

    def create_service(self, table: str):
        """Get the service bound to ``table``.

        Raises:
            ClientError: If no service exists for the table
        """
        from ..domain.exceptions import ClientError

        services = self.create_resource_services()
        if table not in services:
            raise ClientError("Invalid table name")
        return services[table]

    def get_connection_parameters(self) -> Dict[str, Any]:
        """
        Get database connection parameters from configuration.

        Returns:
            Dictionary with connection parameters
        """
        connection_config = self.get_database_config().connection

        return {
            'database_path': connection_config.database_path,
            'foreign_keys': connection_config.foreign_keys,
            'timeout': connection_config.timeout,
        }

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.config_manager.get_environment() == "development"

    def is_production(self) -> bool:
        return self.config_manager.is_production()

    def is_testing(self) -> bool:
        return self.config_manager.is_testing()
