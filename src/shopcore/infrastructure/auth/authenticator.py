"""Identity resolution for bearer tokens and API keys.

Implements the Authenticator class which turns request credentials into a
Principal:
- ``Authorization: Bearer <jwt>`` access tokens
- ``x-api-key: sk_live_...`` API keys

A request is resolved through exactly one of the two paths.
"""

import asyncio
from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.core.config import get_settings
from shopcore.core.logging import get_logger
from shopcore.domain.entities import AuthMethod, Principal
from shopcore.domain.exceptions import (
    AuthenticationRequiredError,
    InvalidAPIKeyError,
    MissingAPIKeyError,
    MissingTokenError,
    StaleTokenError,
    UserNotFoundError,
)
from shopcore.infrastructure.auth.api_key_service import APIKeyService, api_key_service
from shopcore.infrastructure.auth.token_codec import TokenCodec
from shopcore.infrastructure.auth.token_codec import token_codec as default_token_codec
from shopcore.infrastructure.persistence.models import UserModel
from shopcore.infrastructure.persistence.repositories import (
    APIKeyRepository,
    RoleRepository,
    UserRepository,
)

logger = get_logger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a well-formed ``Bearer <token>`` header, else None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


class Authenticator:
    """Resolves request credentials into a Principal."""

    def __init__(
        self,
        session: AsyncSession,
        token_codec: TokenCodec | None = None,
        key_service: APIKeyService | None = None,
        api_key_header: str | None = None,
    ) -> None:
        """Initialize the authenticator.

        Args:
            session: Database session used for user, role and key lookups.
            token_codec: Access token codec. Defaults to the global one.
            key_service: API key service. Defaults to the global one.
            api_key_header: Header carrying API keys. Defaults to settings.
        """
        self.session = session
        self.token_codec = token_codec or default_token_codec
        self.key_service = key_service or api_key_service
        self.api_key_header = (api_key_header or get_settings().api_key_header).lower()

    async def authenticate(self, headers: Mapping[str, str]) -> Principal:
        """Authenticate from request headers.

        A well-formed bearer header selects the token path; otherwise a
        non-blank API key header selects the key path. The paths are never
        combined.

        Raises:
            AuthenticationError: The subclass matching the failure.
        """
        normalized = {name.lower(): value for name, value in headers.items()}

        authorization = normalized.get("authorization")
        if extract_bearer_token(authorization) is not None:
            return await self.authenticate_bearer(authorization)

        api_key = (normalized.get(self.api_key_header) or "").strip()
        if api_key:
            return await self.authenticate_api_key(api_key)

        logger.debug("No credentials presented")
        raise AuthenticationRequiredError()

    async def authenticate_bearer(self, authorization: str | None) -> Principal:
        """Resolve an ``Authorization`` header value.

        Raises:
            MissingTokenError: Header absent or not ``Bearer <token>``.
            InvalidTokenError: Signature, structure or expiry check failed.
            UserNotFoundError: The subject no longer exists.
            StaleTokenError: The token version is not the user's current one.
        """
        token = extract_bearer_token(authorization)
        if token is None:
            raise MissingTokenError()

        claims = self.token_codec.verify(token)

        user = await UserRepository(self.session).get_by_id(claims.user_id)
        if user is None:
            logger.info("Token subject not found", user_id=claims.user_id)
            raise UserNotFoundError(f"user {claims.user_id} not found")

        if claims.token_version != user.token_version:
            logger.info(
                "Stale token rejected",
                user_id=user.id,
                token_version=claims.token_version,
                current_version=user.token_version,
            )
            raise StaleTokenError(
                f"token version {claims.token_version} != {user.token_version}"
            )

        return await self._build_principal(user, AuthMethod.BEARER)

    async def authenticate_api_key(self, api_key: str | None) -> Principal:
        """Resolve an API key header value.

        Candidates are narrowed by the key's lookup prefix and the whole key
        is verified against each candidate's digest.

        Raises:
            MissingAPIKeyError: Header absent or blank.
            InvalidAPIKeyError: Malformed key, no matching digest, or the
                key's owner no longer exists.
        """
        api_key = (api_key or "").strip()
        if not api_key:
            raise MissingAPIKeyError()

        if not self.key_service.is_well_formed(api_key):
            logger.info("Malformed API key rejected")
            raise InvalidAPIKeyError("malformed key")

        key_prefix = self.key_service.lookup_prefix(api_key)
        candidates = await APIKeyRepository(self.session).list_by_prefix(key_prefix)
        match = None
        for candidate in candidates:
            # Argon2 verification blocks; keep it off the event loop
            if await asyncio.to_thread(self.key_service.verify_key, api_key, candidate.key_hash):
                match = candidate
                break
        if match is None:
            logger.info("API key rejected", key_prefix=key_prefix, candidates=len(candidates))
            raise InvalidAPIKeyError(f"no key matches prefix {key_prefix}")

        user = await UserRepository(self.session).get_by_id(match.user_id)
        if user is None:
            logger.warning("API key owner missing", key_id=match.id, user_id=match.user_id)
            raise InvalidAPIKeyError(f"owner {match.user_id} of key {match.id} not found")

        # API keys carry no token version and survive password changes.
        return await self._build_principal(user, AuthMethod.API_KEY)

    async def _build_principal(self, user: UserModel, method: AuthMethod) -> Principal:
        role = await RoleRepository(self.session).get_by_id(user.role_id)
        if role is None:
            logger.warning("User references a missing role", user_id=user.id, role_id=user.role_id)

        return Principal(
            id=user.id,
            name=user.name,
            email=user.email,
            role_id=user.role_id,
            role=role.grant() if role is not None else None,
            auth_method=method,
        )
