"""Pydantic schemas for Shopify webhook payloads.

Only the fields ShopCore reads are declared; everything else Shopify sends
is ignored.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class ShopifyLineItem(BaseModel):
    """One line of a Shopify order."""

    model_config = ConfigDict(extra="ignore")

    product_id: str | None = None
    quantity: int = 0
    title: str | None = None

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v: object) -> object:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ShopifyOrderWebhook(BaseModel):
    """Shopify ``orders/create`` payload."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    line_items: list[ShopifyLineItem] = []


class WebhookAck(BaseModel):
    success: bool = True
