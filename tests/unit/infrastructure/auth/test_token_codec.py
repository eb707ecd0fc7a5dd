"""Unit tests for the access token codec."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from shopcore.core.config import get_settings
from shopcore.domain.exceptions import InvalidTokenError
from shopcore.infrastructure.auth.token_codec import TokenCodec

SECRET = "unit-test-secret-with-enough-length-for-hs256"


@pytest.fixture
def codec():
    return TokenCodec(secret_key=SECRET)


def forge(claims: dict, secret: str = SECRET) -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


class TestSign:
    def test_claims(self, codec):
        token = codec.sign("usr_1", "test@example.com", 3)

        claims = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert claims["sub"] == "usr_1"
        assert claims["email"] == "test@example.com"
        assert claims["token_version"] == 3
        assert claims["exp"] - claims["iat"] == 3600

    def test_per_call_lifetime(self, codec):
        token = codec.sign("usr_1", "test@example.com", 1, ttl=timedelta(minutes=5))

        claims = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert claims["exp"] - claims["iat"] == 300

    def test_secret_defaults_to_settings(self):
        token = TokenCodec().sign("usr_1", "test@example.com", 1)

        claims = jwt.decode(token, get_settings().secret_key, algorithms=["HS256"])
        assert claims["sub"] == "usr_1"


class TestVerify:
    def test_fresh_token(self, codec):
        claims = codec.verify(codec.sign("usr_1", "test@example.com", 4))

        assert claims.user_id == "usr_1"
        assert claims.email == "test@example.com"
        assert claims.token_version == 4
        assert claims.expires_at > datetime.now(timezone.utc)

    def test_expired(self, codec):
        token = codec.sign("usr_1", "test@example.com", 1, ttl=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError):
            codec.verify(token)

    def test_signed_with_another_secret(self, codec):
        token = TokenCodec(secret_key="another-secret-with-enough-length-xx").sign(
            "usr_1", "test@example.com", 1
        )

        with pytest.raises(InvalidTokenError):
            codec.verify(token)

    def test_tampered_payload(self, codec):
        head, _, signature = codec.sign("usr_1", "test@example.com", 1).split(".")
        _, other_payload, _ = codec.sign("usr_2", "other@example.com", 1).split(".")

        with pytest.raises(InvalidTokenError):
            codec.verify(f"{head}.{other_payload}.{signature}")

    def test_garbage(self, codec):
        with pytest.raises(InvalidTokenError):
            codec.verify("not.a.jwt")

    def test_missing_token_version(self, codec):
        now = datetime.now(timezone.utc)
        token = forge({"sub": "usr_1", "iat": now, "exp": now + timedelta(hours=1)})

        with pytest.raises(InvalidTokenError):
            codec.verify(token)

    @pytest.mark.parametrize("version", ["1", 1.5, True])
    def test_non_integer_token_version(self, codec, version):
        now = datetime.now(timezone.utc)
        token = forge({"sub": "usr_1", "token_version": version, "iat": now, "exp": now + timedelta(hours=1)})

        with pytest.raises(InvalidTokenError):
            codec.verify(token)

    def test_unsigned_token(self, codec):
        token = jwt.encode({"sub": "usr_1", "token_version": 1, "exp": 9999999999}, key=None, algorithm="none")

        with pytest.raises(InvalidTokenError):
            codec.verify(token)


def test_ttl_seconds():
    assert TokenCodec(secret_key=SECRET).ttl_seconds == 3600
    assert TokenCodec(secret_key=SECRET, ttl=timedelta(minutes=2)).ttl_seconds == 120
