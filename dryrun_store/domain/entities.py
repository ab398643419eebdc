"""Value objects shared by the query builder and the resource operations."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ClientError


class FilterOperator(str, Enum):
    """Comparison operators accepted in a WHERE clause."""

    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    LIKE = "LIKE"
    IN = "IN"

    @classmethod
    def parse(cls, operator: Any) -> "FilterOperator":
        """Resolve an operator string against the whitelist.

        Raises:
            ClientError: If the operator is not one of the allowed values
        """
        if isinstance(operator, cls):
            return operator
        try:
            return cls(operator)
        except ValueError:
            raise ClientError(f"Invalid operator '{operator}' in filter.") from None


@dataclass(frozen=True)
class Filter:
    """A single column/operator/value condition."""

    column: str
    operator: FilterOperator
    value: Any

    def __post_init__(self):
        operator = FilterOperator.parse(self.operator)
        object.__setattr__(self, "operator", operator)

        if operator is FilterOperator.IN:
            if isinstance(self.value, (str, bytes)) or not isinstance(self.value, Sequence):
                raise ClientError(f"Operator 'IN' on column '{self.column}' requires a list of values.")
            object.__setattr__(self, "value", tuple(self.value))

    @property
    def placeholder_count(self) -> int:
        """Number of bound parameters this filter contributes."""
        if self.operator is FilterOperator.IN:
            return len(self.value)
        return 1

    @property
    def parameters(self) -> list[Any]:
        if self.operator is FilterOperator.IN:
            return list(self.value)
        return [self.value]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Filter":
        """Build a filter from a ``{"column", "operator", "value"}`` mapping."""
        try:
            return cls(
                column=data["column"],
                operator=data["operator"],
                value=data.get("value"),
            )
        except KeyError as e:
            raise ClientError(f"Filter is missing the '{e.args[0]}' key.") from e

    @classmethod
    def coerce(cls, item: "Filter | Mapping[str, Any]") -> "Filter":
        if isinstance(item, cls):
            return item
        if isinstance(item, Mapping):
            return cls.from_dict(item)
        raise ClientError("Each filter must be a mapping with column, operator and value.")
