"""API route handlers."""

from shopcore.infrastructure.api.routes.api_keys_router import router as api_keys_router
from shopcore.infrastructure.api.routes.auth_router import router as auth_router
from shopcore.infrastructure.api.routes.products_router import router as products_router
from shopcore.infrastructure.api.routes.users_router import router as users_router
from shopcore.infrastructure.api.routes.webhooks_router import router as webhooks_router

__all__ = [
    "api_keys_router",
    "auth_router",
    "products_router",
    "users_router",
    "webhooks_router",
]
