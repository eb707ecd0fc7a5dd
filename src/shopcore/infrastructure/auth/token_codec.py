"""Access token codec.

Tokens handed out by ``POST /login`` are HS256 JWTs carrying
``{sub, email, token_version, iat, exp}``. The codec only checks the
signature, the structure and the expiry; whether ``token_version`` is still
current is decided by the authenticator against the live user record.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from shopcore.core.config import get_settings
from shopcore.domain.exceptions import InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of an access token."""

    user_id: str
    email: str | None
    token_version: int
    expires_at: datetime


class TokenCodec:
    """Signs and verifies access tokens with a shared HS256 secret.

    Both the secret and the lifetime fall back to settings, read on each
    call, so tests that change settings see the new values.
    """

    algorithm = "HS256"
    required_claims = ("sub", "exp", "token_version")

    def __init__(self, secret_key: str | None = None, ttl: timedelta | None = None) -> None:
        self._secret_key = secret_key
        self._ttl = ttl

    @property
    def secret_key(self) -> str:
        return self._secret_key or get_settings().secret_key

    @property
    def ttl(self) -> timedelta:
        if self._ttl is not None:
            return self._ttl
        return timedelta(minutes=get_settings().access_token_expire_minutes)

    @property
    def ttl_seconds(self) -> int:
        """Lifetime reported to clients as ``expires_in``."""
        return int(self.ttl.total_seconds())

    def sign(self, user_id: str, email: str, token_version: int, ttl: timedelta | None = None) -> str:
        issued_at = datetime.now(timezone.utc)
        claims = {
            "sub": user_id,
            "email": email,
            "token_version": token_version,
            "iat": issued_at,
            "exp": issued_at + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Check a token and return its claims.

        Raises:
            InvalidTokenError: Bad signature, malformed token, missing or
                mistyped claim, or past ``exp``. The cause is kept in
                ``detail``; callers only ever see "Invalid token".
        """
        try:
            raw = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": list(self.required_claims)},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"token rejected: {e}") from e

        version = raw["token_version"]
        # bool is an int subclass
        if not isinstance(version, int) or isinstance(version, bool):
            raise InvalidTokenError("token_version claim is not an integer")

        return TokenClaims(
            user_id=str(raw["sub"]),
            email=raw.get("email"),
            token_version=version,
            expires_at=datetime.fromtimestamp(raw["exp"], tz=timezone.utc),
        )


token_codec = TokenCodec()
