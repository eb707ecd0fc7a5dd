"""Authentication infrastructure components.

This module provides secret hashing, access token services, API keys,
identity resolution and webhook signature verification.
"""

from shopcore.infrastructure.auth.api_key_service import APIKeyService, api_key_service
from shopcore.infrastructure.auth.authenticator import Authenticator, extract_bearer_token
from shopcore.infrastructure.auth.password_hasher import (
    SecretHasher,
    get_secret_hasher,
    hash_password,
    needs_rehash,
    verify_dummy_password,
    verify_password,
)
from shopcore.infrastructure.auth.token_codec import TokenClaims, TokenCodec, token_codec
from shopcore.infrastructure.auth.webhook_verifier import WebhookVerifier

__all__ = [
    "APIKeyService",
    "Authenticator",
    "SecretHasher",
    "TokenClaims",
    "TokenCodec",
    "WebhookVerifier",
    "api_key_service",
    "extract_bearer_token",
    "get_secret_hasher",
    "hash_password",
    "needs_rehash",
    "token_codec",
    "verify_dummy_password",
    "verify_password",
]
