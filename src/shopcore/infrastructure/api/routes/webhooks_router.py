"""Shopify webhook routes.

The signature is checked against the raw body before the payload is
parsed; re-serialising a parsed body would not reproduce the signed bytes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from shopcore.core.logging import get_logger
from shopcore.domain.exceptions import MissingWebhookSignatureError, WebhookSignatureError
from shopcore.infrastructure.api.dependencies import DbSession, get_webhook_verifier
from shopcore.infrastructure.api.schemas.webhook_schemas import ShopifyOrderWebhook, WebhookAck
from shopcore.infrastructure.auth import WebhookVerifier
from shopcore.infrastructure.persistence.repositories import ProductRepository

logger = get_logger(__name__)

router = APIRouter(tags=["Webhooks"])


@router.post(
    "/shopify-sales",
    response_model=WebhookAck,
    responses={401: {"description": "Missing or invalid HMAC signature"}},
)
async def handle_order_created(
    request: Request,
    session: DbSession,
    verifier: Annotated[WebhookVerifier, Depends(get_webhook_verifier)],
    x_shopify_hmac_sha256: Annotated[str | None, Header()] = None,
) -> WebhookAck | JSONResponse:
    """Add each order line's quantity to the matching product's sales count."""
    if not x_shopify_hmac_sha256:
        logger.warning("Webhook received without HMAC header")
        raise MissingWebhookSignatureError()

    raw_body = await request.body()
    if not verifier.verify(raw_body, x_shopify_hmac_sha256):
        logger.warning("Invalid webhook signature")
        raise WebhookSignatureError("hmac mismatch or secret not configured")

    try:
        order = ShopifyOrderWebhook.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning("Webhook payload rejected", errors=e.error_count())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request format"},
        )

    logger.info("Processing order webhook", order_id=order.id, line_items=len(order.line_items))

    repo = ProductRepository(session)
    for item in order.line_items:
        if not item.product_id or item.quantity <= 0:
            continue

        product = await repo.get_by_shopify_id(item.product_id)
        if product is None:
            logger.warning("Product not found for Shopify ID", shopify_id=item.product_id)
            continue

        updated = await repo.increment_sales(product.id, item.quantity)
        logger.info(
            "Sales count updated",
            product_id=product.id,
            sales_count=updated.sales_count if updated else None,
        )

    await session.commit()
    return WebhookAck()
