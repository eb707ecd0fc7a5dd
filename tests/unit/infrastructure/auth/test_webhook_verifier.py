"""Unit tests for Shopify webhook signature verification."""

import base64
import hashlib
import hmac

import pytest

from shopcore.infrastructure.auth import WebhookVerifier

SECRET = "shpss_test_secret"
BODY = b'{"id": 820982911946154500, "line_items": [{"product_id": 632910392, "quantity": 2}]}'


def sign(body: bytes, secret: str = SECRET) -> str:
    return base64.b64encode(hmac.new(secret.encode(), body, hashlib.sha256).digest()).decode()


@pytest.fixture
def verifier():
    return WebhookVerifier(secret=SECRET)


class TestWebhookVerifier:
    def test_valid_signature(self, verifier):
        assert verifier.verify(BODY, sign(BODY)) is True

    def test_compute_signature_matches_reference(self, verifier):
        assert verifier.compute_signature(BODY, SECRET) == sign(BODY)

    def test_flipped_body_byte_is_rejected(self, verifier):
        signature = sign(BODY)
        tampered = bytearray(BODY)
        tampered[10] ^= 0x01

        assert verifier.verify(bytes(tampered), signature) is False

    def test_flipped_signature_character_is_rejected(self, verifier):
        signature = sign(BODY)
        flipped = ("B" if signature[0] == "A" else "A") + signature[1:]

        assert verifier.verify(BODY, flipped) is False

    def test_reserialized_body_is_rejected(self, verifier):
        signature = sign(BODY)
        reserialized = BODY.replace(b": ", b":")

        assert verifier.verify(reserialized, signature) is False

    def test_wrong_secret_is_rejected(self, verifier):
        assert verifier.verify(BODY, sign(BODY, "other-secret")) is False

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature_is_rejected(self, verifier, signature):
        assert verifier.verify(BODY, signature) is False

    def test_unset_secret_always_rejects(self):
        verifier = WebhookVerifier(secret="")

        assert verifier.verify(BODY, sign(BODY, "")) is False
        assert verifier.verify(BODY, sign(BODY)) is False

    def test_secret_defaults_to_settings(self):
        # the test environment configures no webhook secret
        assert WebhookVerifier().verify(BODY, sign(BODY)) is False
