"""Database connection and simulated transaction abstractions."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")

UnitOfWork = Callable[..., Awaitable[T]]


class DatabaseConnection(ABC):
    """Abstract interface for database connection management.

    Provides core database connectivity operations including connection
    lifecycle, health checking, and resource management.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to the database.

        Raises:
            ServerError: If connection cannot be established
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the database connection and clean up resources.

        Should be idempotent - safe to call multiple times.
        """
        pass

    @abstractmethod
    async def is_connected(self) -> bool:
        """Check if database connection is active.

        Returns:
            bool: True if connection is active, False otherwise
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Ping the database to verify connectivity.

        Returns:
            bool: True if database responds, False otherwise
        """
        pass

    @abstractmethod
    async def get_connection_info(self) -> dict[str, Any]:
        """Get information about the current connection.

        Returns:
            Dict containing connection metadata like engine version and
            database location
        """
        pass


class TransactionRunner(ABC):
    """Abstract interface for running work inside a simulated transaction.

    Every call acquires its own connection, opens a transaction, runs one
    unit of work and rolls the transaction back, whatever the outcome.
    """

    @abstractmethod
    async def run_simulated(self, unit_of_work: UnitOfWork[T], *args: Any, **kwargs: Any) -> T:
        """Run ``unit_of_work(executor, *args, **kwargs)`` and roll back.

        Args:
            unit_of_work: Coroutine function receiving the query executor
                bound to the open transaction as its first argument

        Returns:
            Whatever the unit of work returned

        Raises:
            ClientError: Bad input or a classified storage error
            NotFoundError: Raised unchanged from the unit of work
            ServerError: Connection failures and unexpected exceptions
        """
        pass
