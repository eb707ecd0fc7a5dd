"""API key generation and storage.

Keys look like ``sk_live_<43 base64url chars>``: 32 random bytes, base64url
encoded without padding. Only an Argon2 digest of the whole key is stored,
together with the first characters of the random part as a lookup prefix.
"""

import asyncio
import re
import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.core.logging import get_logger
from shopcore.infrastructure.auth.password_hasher import SecretHasher, get_secret_hasher
from shopcore.infrastructure.persistence.models import APIKeyModel
from shopcore.infrastructure.persistence.repositories import APIKeyRepository

logger = get_logger(__name__)


class APIKeyService:
    """Service for generating, hashing and storing API keys."""

    KEY_PREFIX = "sk_live_"
    RANDOM_BYTES = 32
    LOOKUP_PREFIX_LENGTH = 12
    KEY_PATTERN = re.compile(r"^sk_live_[A-Za-z0-9_-]{43}$")

    def __init__(self, hasher: SecretHasher | None = None) -> None:
        self._hasher = hasher

    @property
    def hasher(self) -> SecretHasher:
        return self._hasher or get_secret_hasher()

    def generate_key(self) -> str:
        """Generate a new plaintext API key."""
        return self.KEY_PREFIX + secrets.token_urlsafe(self.RANDOM_BYTES)

    def is_well_formed(self, key: str) -> bool:
        """Check that a key matches the ``sk_live_<43>`` format."""
        return bool(self.KEY_PATTERN.match(key))

    def lookup_prefix(self, key: str) -> str:
        """Return the non-secret lookup prefix of a key.

        Args:
            key: A well-formed plaintext key.

        Returns:
            The first characters of the random part.
        """
        return key[len(self.KEY_PREFIX) : len(self.KEY_PREFIX) + self.LOOKUP_PREFIX_LENGTH]

    def hash_key(self, key: str) -> str:
        """Hash a key with the secret hasher."""
        return self.hasher.hash(key)

    def verify_key(self, key: str, key_hash: str) -> bool:
        """Verify a plaintext key against a stored digest."""
        return self.hasher.verify(key, key_hash)

    async def create_api_key(
        self,
        session: AsyncSession,
        user_id: str,
        name: str,
    ) -> tuple[str, APIKeyModel]:
        """Generate a key for a user and store its digest.

        Args:
            session: SQLAlchemy async session. The caller commits.
            user_id: ID of the user owning the key.
            name: Human-readable name for the key.

        Returns:
            tuple: (plaintext_key, APIKeyModel). The plaintext is not
            recoverable afterwards.
        """
        plaintext_key = self.generate_key()
        model = APIKeyModel(
            user_id=user_id,
            name=name,
            key_prefix=self.lookup_prefix(plaintext_key),
            key_hash=await asyncio.to_thread(self.hash_key, plaintext_key),
        )
        model = await APIKeyRepository(session).create(model)

        logger.info(
            "API key created",
            key_id=model.id,
            user_id=user_id,
            key_prefix=model.key_prefix,
        )
        return plaintext_key, model


# Global service instance
api_key_service = APIKeyService()
