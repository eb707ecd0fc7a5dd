"""The ShopCore ASGI application.

``create_app`` wires settings, the process-wide collaborators kept on
``app.state`` (login throttle, Shopify client, webhook verifier), CORS, the
correlation-ID middleware, the routers and the error renderers. ``app`` is
the instance uvicorn serves.
"""

import re
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from shopcore.core.config import Settings, get_settings
from shopcore.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from shopcore.domain.exceptions import (
    AuthenticationRequiredError,
    RateLimitedError,
    ShopCoreError,
    UpstreamDependencyError,
)
from shopcore.domain.services import LoginThrottle
from shopcore.infrastructure.auth import WebhookVerifier
from shopcore.infrastructure.commerce import ShopifyClient
from shopcore.infrastructure.persistence import database

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
# Shape a client-supplied correlation ID must have to be reused
CORRELATION_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,64}")
_PYDANTIC_VALUE_ERROR = "Value error, "

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health() -> dict:
    """Liveness only; the credential store is not touched."""
    settings = get_settings()
    return {"status": "OK", "service": settings.app_name, "version": settings.app_version}


@health_router.get("/ready")
async def ready():
    if await database.get_database().ping():
        return {"status": "ready", "database": "connected"}
    return JSONResponse(status_code=503, content={"status": "not_ready", "database": "disconnected"})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    configure_logging(settings)
    logger.info(
        "ShopCore starting",
        version=settings.app_version,
        environment=settings.environment,
        shopify_mode="live" if settings.shopify_configured else "mock",
    )
    if not settings.shopify_webhook_secret:
        logger.warning("No Shopify webhook secret; every webhook will be rejected")

    await database.init_database()
    try:
        yield
    finally:
        await database.close_database()
        logger.info("ShopCore stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to build from. Loaded from the environment when
            omitted.
    """
    settings = settings or get_settings()
    interactive_docs = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="E-commerce backend with role-based access and Shopify integration",
        docs_url="/docs" if interactive_docs else None,
        redoc_url="/redoc" if interactive_docs else None,
        openapi_url="/openapi.json" if interactive_docs else None,
        lifespan=lifespan,
    )

    app.state.login_throttle = LoginThrottle(
        cooldown_seconds=settings.login_cooldown_seconds,
        max_entries=settings.login_throttle_max_entries,
    )
    app.state.shopify_client = ShopifyClient(settings)
    app.state.webhook_verifier = WebhookVerifier()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(correlate_request)

    _include_routers(app)
    _install_error_renderers(app)
    return app


async def correlate_request(request: Request, call_next):
    """Bind a correlation ID for the request and echo it on the response."""
    correlation_id = request.headers.get(CORRELATION_HEADER, "")
    if not CORRELATION_ID_PATTERN.fullmatch(correlation_id):
        correlation_id = new_correlation_id()
    bind_correlation_id(correlation_id)
    try:
        response = await call_next(request)
        logger.info(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
    finally:
        clear_context()


def _include_routers(app: FastAPI) -> None:
    from shopcore.infrastructure.api.routes import (
        api_keys_router,
        auth_router,
        products_router,
        users_router,
        webhooks_router,
    )

    app.include_router(health_router)
    app.include_router(auth_router, tags=["auth"])
    app.include_router(users_router, tags=["users"])
    app.include_router(products_router)
    app.include_router(api_keys_router, prefix="/api-keys")
    app.include_router(webhooks_router, prefix="/webhooks")


def error_body(exc: ShopCoreError) -> dict:
    """JSON body for a :class:`ShopCoreError`.

    Always carries ``error``; adds ``hint`` or ``retry_after`` for the
    errors that define them, and ``detail`` only when settings allow it.
    """
    body: dict = {"error": exc.public_message}
    if isinstance(exc, AuthenticationRequiredError):
        body["hint"] = exc.hint
    if isinstance(exc, RateLimitedError):
        body["retry_after"] = exc.retry_after
    if exc.detail and get_settings().expose_error_details:
        body["detail"] = exc.detail
    return body


def _validation_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        details.append({"field": field, "message": message.removeprefix(_PYDANTIC_VALUE_ERROR)})
    return details


def _install_error_renderers(app: FastAPI) -> None:
    @app.exception_handler(ShopCoreError)
    async def render_shopcore_error(request: Request, exc: ShopCoreError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "Request rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error_type=type(exc).__name__,
            detail=exc.detail,
        )
        return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def render_validation_error(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.info("Request body rejected", path=request.url.path, errors=len(details))
        return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})

    @app.exception_handler(SQLAlchemyError)
    async def render_store_error(request: Request, exc: SQLAlchemyError):
        logger.error("Credential store error", path=request.url.path, exc_type=type(exc).__name__, error=str(exc))
        error = UpstreamDependencyError(str(exc))
        return JSONResponse(status_code=error.status_code, content=error_body(error))

    @app.exception_handler(Exception)
    async def render_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled exception", path=request.url.path)
        body = {"error": "Internal server error"}
        if get_settings().expose_error_details:
            body["detail"] = str(exc)
        return JSONResponse(status_code=500, content=body)


app = create_app()
