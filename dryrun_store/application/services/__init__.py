"""Application services implementing use cases."""

from .base_service import BaseApplicationService
from .exception_handler import ErrorResponse, handle_exception
from .resource_services import (
    CategoryService,
    ProductService,
    PurchaseService,
    ResourceService,
    UserService,
    create_resource_services,
)

__all__ = [
    # Base service classes
    "BaseApplicationService",
    "ResourceService",
    # Concrete service classes
    "CategoryService",
    "ProductService",
    "PurchaseService",
    "UserService",
    "create_resource_services",
    # Error rendering
    "ErrorResponse",
    "handle_exception",
]
