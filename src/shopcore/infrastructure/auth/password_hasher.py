"""Secret hashing utility using Argon2.

Hashes and verifies account passwords and API-key secrets with Argon2id.
The work factor is fixed by configuration (``hasher_time_cost``), so every
digest in the store is produced under the same cost until the settings
change, at which point :func:`needs_rehash` reports the older digests.
"""

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from shopcore.core.config import get_settings


class SecretHasher:
    """Argon2id hasher with a fixed, configured cost."""

    def __init__(self, time_cost: int = 12, memory_cost: int = 65536, parallelism: int = 4) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    def hash(self, secret: str) -> str:
        """Hash a secret.

        Args:
            secret: The plaintext password or API key.

        Returns:
            The encoded Argon2id digest.
        """
        return self._hasher.hash(secret)

    def verify(self, secret: str, digest: str) -> bool:
        """Verify a secret against a digest.

        Argon2 compares in constant time. A malformed stored digest verifies
        as False instead of raising.
        """
        try:
            return self._hasher.verify(digest, secret)
        except VerifyMismatchError:
            return False
        except (VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, digest: str) -> bool:
        """Check if a digest was produced under different parameters."""
        return self._hasher.check_needs_rehash(digest)


@lru_cache
def get_secret_hasher() -> SecretHasher:
    """Get the process-wide hasher built from settings."""
    settings = get_settings()
    return SecretHasher(
        time_cost=settings.hasher_time_cost,
        memory_cost=settings.hasher_memory_cost,
        parallelism=settings.hasher_parallelism,
    )


def hash_password(password: str) -> str:
    """Hash a password with the configured hasher.

    Example:
        >>> hashed = hash_password("SecureP@ss1")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return get_secret_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    Example:
        >>> hashed = hash_password("SecureP@ss1")
        >>> verify_password("SecureP@ss1", hashed)
        True
        >>> verify_password("wrong", hashed)
        False
    """
    return get_secret_hasher().verify(password, hashed)


def needs_rehash(hashed: str) -> bool:
    """Check if a password hash needs to be rehashed."""
    return get_secret_hasher().needs_rehash(hashed)


@lru_cache
def _dummy_hash() -> str:
    return get_secret_hasher().hash("shopcore-dummy-password")


def verify_dummy_password(password: str) -> None:
    """Run a verification against a throwaway hash.

    Used when the account does not exist, so a failed login costs the same
    time whether or not the email is registered.
    """
    get_secret_hasher().verify(password, _dummy_hash())
