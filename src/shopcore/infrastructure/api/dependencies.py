"""FastAPI dependencies for authentication and authorization.

Route handlers receive the authenticated Principal as a parameter; nothing
is attached to the request object. Capability checks are declared with
:func:`require_capability`, which parses the capability name when the route
module is imported, so a misspelt capability fails at startup.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.core.config import get_settings
from shopcore.domain.entities import Capability, Principal
from shopcore.domain.services import LoginThrottle, check_permission
from shopcore.infrastructure.auth import Authenticator, WebhookVerifier
from shopcore.infrastructure.commerce import ShopifyClient
from shopcore.infrastructure.persistence.database import get_db_session

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_login_throttle(request: Request) -> LoginThrottle:
    """Get the login throttle from app state.

    Created on first use when the app was built without one.
    """
    if not hasattr(request.app.state, "login_throttle"):
        settings = get_settings()
        request.app.state.login_throttle = LoginThrottle(
            cooldown_seconds=settings.login_cooldown_seconds,
            max_entries=settings.login_throttle_max_entries,
        )
    return request.app.state.login_throttle


def get_shopify_client(request: Request) -> ShopifyClient:
    """Get the Shopify client from app state."""
    if not hasattr(request.app.state, "shopify_client"):
        request.app.state.shopify_client = ShopifyClient()
    return request.app.state.shopify_client


def get_webhook_verifier(request: Request) -> WebhookVerifier:
    """Get the webhook verifier from app state."""
    if not hasattr(request.app.state, "webhook_verifier"):
        request.app.state.webhook_verifier = WebhookVerifier()
    return request.app.state.webhook_verifier


async def get_bearer_principal(
    session: DbSession,
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    """Resolve the principal from ``Authorization: Bearer <token>`` only.

    Raises:
        AuthenticationError: Missing, invalid or stale token, or unknown user.
    """
    return await Authenticator(session).authenticate_bearer(authorization)


async def get_principal(request: Request, session: DbSession) -> Principal:
    """Resolve the principal from a bearer token or, failing that, an API key.

    Raises:
        AuthenticationError: No credentials, or the chosen path rejected them.
    """
    return await Authenticator(session).authenticate(request.headers)


BearerPrincipal = Annotated[Principal, Depends(get_bearer_principal)]
CurrentPrincipal = Annotated[Principal, Depends(get_principal)]


def require_capability(
    capability: Capability | str,
    *,
    allow_api_key: bool = False,
) -> Callable[..., Awaitable[Principal]]:
    """Build a dependency that authenticates and then checks a capability.

    Args:
        capability: Capability the role must grant.
        allow_api_key: Accept API keys as well as bearer tokens.

    Returns:
        A dependency returning the permitted Principal.

    Raises:
        ValueError: Immediately, if ``capability`` is not a known name.
    """
    required = Capability.parse(capability)

    if allow_api_key:

        async def checker(principal: CurrentPrincipal) -> Principal:
            check_permission(principal, required)
            return principal

    else:

        async def checker(principal: BearerPrincipal) -> Principal:
            check_permission(principal, required)
            return principal

    return checker
