"""Persistence repositories for database operations."""

from shopcore.infrastructure.persistence.repositories.api_key_repository import (
    APIKeyRepository,
)
from shopcore.infrastructure.persistence.repositories.product_repository import (
    ProductRepository,
)
from shopcore.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)
from shopcore.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "APIKeyRepository",
    "ProductRepository",
    "RoleRepository",
    "UserRepository",
]
