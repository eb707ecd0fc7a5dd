"""Product API routes.

Every route accepts a bearer token or an API key. Products are created on
Shopify and mirrored locally; when Shopify is not configured they are
created locally only (mock mode).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from shopcore.core.logging import get_logger
from shopcore.domain.entities import Capability, Principal
from shopcore.domain.exceptions import PermissionDeniedError
from shopcore.domain.services import check_permission
from shopcore.infrastructure.api.dependencies import (
    CurrentPrincipal,
    DbSession,
    get_shopify_client,
    require_capability,
)
from shopcore.infrastructure.api.schemas.product_schemas import (
    AddSaleRequest,
    AddSaleResponse,
    BestsellersResponse,
    ProductCreateRequest,
    ProductCreateResponse,
    ProductListResponse,
    ProductResponse,
)
from shopcore.infrastructure.commerce import ShopifyClient, mock_product_id
from shopcore.infrastructure.persistence.models import ProductModel
from shopcore.infrastructure.persistence.repositories import ProductRepository

logger = get_logger(__name__)

router = APIRouter(tags=["Products"])


@router.post(
    "/products",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductCreateResponse,
    response_model_exclude_none=True,
)
async def create_product(
    data: ProductCreateRequest,
    principal: Annotated[
        Principal,
        Depends(require_capability(Capability.POST_PRODUCTS, allow_api_key=True)),
    ],
    session: DbSession,
    shopify: Annotated[ShopifyClient, Depends(get_shopify_client)],
) -> ProductCreateResponse:
    """Create a product on Shopify and record it locally.

    An image requires the can_upload_images capability.
    """
    image_url = str(data.image_url) if data.image_url else None
    if image_url:
        try:
            check_permission(principal, Capability.UPLOAD_IMAGES)
        except PermissionDeniedError as e:
            raise PermissionDeniedError(
                e.detail,
                message="Permission denied: Image upload requires PREMIUM role or higher",
            ) from e

    mock = not shopify.is_configured
    if mock:
        logger.warning("Shopify not configured, creating product in mock mode")
        shopify_id, title, price = mock_product_id(), data.name, data.price
    else:
        created = await shopify.create_product(data.name, data.price, image_url)
        shopify_id, title, price = created.product_id, created.title, created.price

    product = await ProductRepository(session).create(
        ProductModel(
            shopify_id=shopify_id,
            name=title,
            price=price,
            image_url=image_url,
            created_by=principal.id,
        )
    )
    await session.commit()

    logger.info("Product created", product_id=product.id, shopify_id=shopify_id, mock=mock)
    return ProductCreateResponse(
        product=ProductResponse.model_validate(product),
        mock=True if mock else None,
        message="Product created in DB only (Shopify mock mode)" if mock else None,
    )


@router.get("/my-products", response_model=ProductListResponse)
async def get_my_products(principal: CurrentPrincipal, session: DbSession) -> ProductListResponse:
    """List the caller's products, newest first."""
    products = await ProductRepository(session).list_by_creator(principal.id)
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        count=len(products),
    )


@router.get("/products", response_model=ProductListResponse)
async def get_all_products(principal: CurrentPrincipal, session: DbSession) -> ProductListResponse:
    """List every product, newest first."""
    products = await ProductRepository(session).list_all()
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        count=len(products),
    )


@router.get("/my-bestsellers", response_model=BestsellersResponse)
async def get_my_bestsellers(
    principal: Annotated[
        Principal,
        Depends(require_capability(Capability.GET_BESTSELLERS, allow_api_key=True)),
    ],
    session: DbSession,
) -> BestsellersResponse:
    """List the caller's products ordered by units sold."""
    products = await ProductRepository(session).list_bestsellers(principal.id)
    return BestsellersResponse(
        bestsellers=[ProductResponse.model_validate(p) for p in products],
        count=len(products),
    )


@router.post(
    "/products/{product_id}/add-sale",
    response_model=AddSaleResponse,
    responses={
        403: {"description": "Product belongs to another user"},
        404: {"description": "Product not found"},
    },
)
async def add_sale(
    product_id: int,
    principal: Annotated[
        Principal,
        Depends(require_capability(Capability.GET_BESTSELLERS, allow_api_key=True)),
    ],
    session: DbSession,
    data: AddSaleRequest | None = None,
) -> AddSaleResponse | JSONResponse:
    """Record a manual sale on one of the caller's products."""
    quantity = (data or AddSaleRequest()).effective_quantity
    repo = ProductRepository(session)

    product = await repo.get_by_id(product_id)
    if product is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Product not found"},
        )

    if product.created_by != principal.id:
        raise PermissionDeniedError(
            f"user {principal.id} does not own product {product_id}",
            message="You can only add sales to your own products",
        )

    updated = await repo.increment_sales(product_id, quantity)
    await session.commit()

    logger.info("Sale recorded", product_id=product_id, quantity=quantity)
    return AddSaleResponse(
        message=f'Added {quantity} sale(s) to product "{product.name}"',
        product=ProductResponse.model_validate(updated),
    )
