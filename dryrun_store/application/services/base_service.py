"""
Base service class providing common application service functionality.

Services log every operation with a class prefix and let ``AppError``
subclasses propagate unchanged to the caller.
"""

import logging
from typing import Any

from dryrun_store.domain.exceptions import ClientError


class BaseApplicationService:
    """
    Base class for all application services.

    Provides common functionality for:
    - Logging with a per-class prefix
    - Required-parameter validation
    - Standardized operation execution
    """

    def __init__(self, logger_name: str | None = None):
        """
        Initialize base application service.

        Args:
            logger_name: Custom logger name (defaults to module and class name)
        """
        self._logger = logging.getLogger(logger_name or f"{__name__}.{self.__class__.__name__}")
        self._log_prefix = f"[{self.__class__.__name__}]"

    def _log_operation_start(self, operation: str, context: str = "") -> None:
        context_info = f" ({context})" if context else ""
        self._logger.debug(f"{self._log_prefix} Starting {operation}{context_info}")

    def _log_operation_success(self, operation: str, context: str = "") -> None:
        context_info = f" ({context})" if context else ""
        self._logger.debug(f"{self._log_prefix} Successfully completed {operation}{context_info}")

    def _log_operation_error(self, operation: str, error: Exception, context: str = "") -> None:
        """Log an error during a service operation."""
        context_info = f" ({context})" if context else ""
        self._logger.error(
            f"{self._log_prefix} Failed {operation}{context_info}: {error}",
            extra={
                'operation': operation,
                'error_type': error.__class__.__name__,
                'service_class': self.__class__.__name__,
            },
        )

    async def _execute_operation(self, operation_name: str, operation_func: Any, context: str = "") -> Any:
        """
        Execute a service operation with standardized logging.

        Args:
            operation_name: Name of the operation for logging
            operation_func: Zero-argument async function to execute
            context: Additional context for logging

        Returns:
            Result of the operation
        """
        self._log_operation_start(operation_name, context)

        try:
            result = await operation_func()
        except Exception as e:
            self._log_operation_error(operation_name, e, context)
            raise

        self._log_operation_success(operation_name, context)
        return result

    def _validate_required_params(self, params: dict[str, Any]) -> None:
        """
        Validate that required parameters are present and not None.

        Raises:
            ClientError: If any required parameter is missing or None
        """
        missing_params = [name for name, value in params.items() if value is None]
        if missing_params:
            raise ClientError(f"Required parameters missing: {', '.join(missing_params)}")
