"""Shopify Admin API client.

Only product creation is needed: products are created on Shopify first and
then mirrored locally. When no store domain or admin token is configured the
client reports itself as unconfigured and callers fall back to mock mode.
"""

import secrets
import time
from dataclasses import dataclass
from typing import Any

import httpx

from shopcore.core.config import Settings, get_settings
from shopcore.core.logging import get_logger
from shopcore.domain.exceptions import UpstreamDependencyError

logger = get_logger(__name__)


@dataclass(frozen=True)
class ShopifyProduct:
    """Product as returned by Shopify.

    Attributes:
        product_id: Shopify product ID, as a string.
        title: Product title.
        price: Price of the first variant.
    """

    product_id: str
    title: str
    price: float


def mock_product_id() -> str:
    """Generate a local-only product ID for mock mode."""
    return f"mock_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


class ShopifyClient:
    """Thin async wrapper around the Shopify Admin REST API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Settings to read the store credentials from.
            transport: Optional httpx transport, used by tests.
        """
        self.settings = settings or get_settings()
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self.settings.shopify_configured

    @property
    def base_url(self) -> str:
        return (
            f"https://{self.settings.shopify_store_domain}"
            f"/admin/api/{self.settings.shopify_api_version}"
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                "X-Shopify-Access-Token": self.settings.shopify_admin_api_token or "",
            },
            timeout=self.settings.shopify_timeout_seconds,
            transport=self._transport,
        )

    async def create_product(
        self,
        name: str,
        price: float,
        image_url: str | None = None,
    ) -> ShopifyProduct:
        """Create a product with a single variant.

        Args:
            name: Product title.
            price: Variant price, sent with two decimals.
            image_url: Optional image source URL.

        Returns:
            The created product.

        Raises:
            UpstreamDependencyError: On transport errors, non-2xx responses
                or a response without a product ID.
        """
        if not self.is_configured:
            raise UpstreamDependencyError("Shopify credentials are not configured")

        product: dict[str, Any] = {
            "title": name,
            "variants": [{"price": f"{price:.2f}"}],
        }
        if image_url:
            product["images"] = [{"src": image_url}]

        async with self._client() as client:
            try:
                response = await client.post("/products.json", json={"product": product})
            except httpx.HTTPError as e:
                logger.error("Shopify request failed", error=str(e))
                raise UpstreamDependencyError(f"Shopify request failed: {e}") from e

        if response.is_error:
            logger.error(
                "Shopify API error",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise UpstreamDependencyError(
                f"Shopify API error ({response.status_code}): {response.text[:500]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamDependencyError("Shopify returned invalid JSON") from e

        data = payload.get("product") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            logger.error("Shopify returned an unexpected body", body=response.text[:500])
            raise UpstreamDependencyError("Shopify returned an unexpected body")

        product_id = data.get("id")
        if not product_id:
            raise UpstreamDependencyError("Missing product id from Shopify response")

        created = ShopifyProduct(
            product_id=str(product_id),
            title=data.get("title") or name,
            price=_first_variant_price(data, default=price),
        )
        logger.info("Shopify product created", shopify_id=created.product_id)
        return created


def _first_variant_price(product: dict[str, Any], default: float) -> float:
    """Price of the first variant, or ``default`` when Shopify omits it."""
    variants = product.get("variants")
    if not isinstance(variants, list) or not variants or not isinstance(variants[0], dict):
        return default
    try:
        return float(variants[0].get("price") or default)
    except (TypeError, ValueError):
        return default
