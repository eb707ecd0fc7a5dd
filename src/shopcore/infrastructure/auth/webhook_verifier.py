"""Shopify webhook signature verification.

Shopify signs each webhook with HMAC-SHA256 over the raw request body using
the app's shared secret and sends the base64 digest in
``X-Shopify-Hmac-Sha256``. The body must be verified exactly as received,
before any JSON parsing.
"""

import base64
import hashlib
import hmac

from shopcore.core.config import get_settings


class WebhookVerifier:
    """Verifies Shopify webhook HMAC signatures."""

    def __init__(self, secret: str | None = None) -> None:
        """Initialize the verifier.

        Args:
            secret: Shared webhook secret. Falls back to
                ``settings.shopify_webhook_secret`` when not given.
        """
        self._secret = secret

    @property
    def secret(self) -> str | None:
        if self._secret is not None:
            return self._secret
        return get_settings().shopify_webhook_secret

    def compute_signature(self, raw_body: bytes, secret: str) -> str:
        """Base64-encoded HMAC-SHA256 of the body."""
        digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def verify(self, raw_body: bytes, signature: str | None) -> bool:
        """Check a signature against the raw body.

        Args:
            raw_body: Request body bytes exactly as received.
            signature: Value of the signature header.

        Returns:
            True only if a secret is configured and the signature matches.
        """
        secret = self.secret
        if not secret or not signature:
            return False

        expected = self.compute_signature(raw_body, secret)
        return hmac.compare_digest(expected.encode("ascii"), signature.strip().encode("utf-8"))
