"""ShopCore - e-commerce backend.

Authenticates users with access tokens or API keys, gates actions on
role capabilities, creates products on Shopify and counts sales from
Shopify order webhooks.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
