"""Domain types: the error taxonomy and query filters."""

from .entities import Filter, FilterOperator
from .exceptions import AppError, ClientError, DomainError, NotFoundError, ServerError

__all__ = [
    "AppError",
    "ClientError",
    "DomainError",
    "Filter",
    "FilterOperator",
    "NotFoundError",
    "ServerError",
]
