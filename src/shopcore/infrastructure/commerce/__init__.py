"""External commerce platform integrations."""

from shopcore.infrastructure.commerce.shopify_client import (
    ShopifyClient,
    ShopifyProduct,
    mock_product_id,
)

__all__ = ["ShopifyClient", "ShopifyProduct", "mock_product_id"]
