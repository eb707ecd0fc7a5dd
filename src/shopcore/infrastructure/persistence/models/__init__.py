"""SQLAlchemy models for ShopCore tables.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from shopcore.infrastructure.persistence.models.api_key import APIKeyModel
from shopcore.infrastructure.persistence.models.product import ProductModel
from shopcore.infrastructure.persistence.models.role import RoleModel
from shopcore.infrastructure.persistence.models.user import UserModel

__all__ = [
    "APIKeyModel",
    "ProductModel",
    "RoleModel",
    "UserModel",
]
