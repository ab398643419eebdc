"""Database schema management abstractions."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TableDefinition:
    """Represents a database table definition."""

    name: str
    columns: dict[str, str]  # column_name -> column_definition
    foreign_keys: dict[str, str] = field(default_factory=dict)  # column -> referenced_table.column
    constraints: list[str] = field(default_factory=list)

    @property
    def dependencies(self) -> set[str]:
        """Tables referenced through foreign keys."""
        return {ref.split(".", 1)[0] for ref in self.foreign_keys.values()}


class SchemaManager(ABC):
    """Abstract interface for database schema management.

    Schema creation is the one place where changes are committed; every
    other write in this package runs inside a simulated transaction.
    """

    @abstractmethod
    async def create_schema(self) -> None:
        """Create all tables that do not exist yet.

        Raises:
            ServerError: If schema creation fails
        """
        pass

    @abstractmethod
    async def get_existing_tables(self) -> list[str]:
        """Get the names of the tables present in the database."""
        pass

    @abstractmethod
    async def validate_schema(self) -> bool:
        """Check that every expected table exists.

        Returns:
            bool: True if all tables are present
        """
        pass
