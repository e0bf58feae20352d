"""
PURPOSE: Tests for Shopify webhook HMAC verification.

Tests cover:
- Digest format (base64 HMAC-SHA256 over the raw body)
- Acceptance of a correct signature only
- Rejection of tampered bodies, wrong secrets and missing inputs
"""

import base64
import hashlib
import hmac

from shopsync.webhook.signing import compute_shopify_hmac, verify_shopify_hmac

SECRET = "shpss_example_secret"
BODY = b'{"id":123,"total_price":"50.00","customer":{"id":9}}'


class TestComputeShopifyHmac:
    """Test digest computation."""

    def test_matches_base64_hmac_sha256(self):
        """Digest equals base64(HMAC-SHA256(secret, body))."""
        expected = base64.b64encode(
            hmac.new(SECRET.encode(), BODY, hashlib.sha256).digest()
        ).decode()
        assert compute_shopify_hmac(BODY, SECRET) == expected

    def test_digest_depends_on_exact_bytes(self):
        """Whitespace changes in the JSON change the digest."""
        spaced = b'{"id": 123, "total_price": "50.00", "customer": {"id": 9}}'
        assert compute_shopify_hmac(BODY, SECRET) != compute_shopify_hmac(spaced, SECRET)


class TestVerifyShopifyHmac:
    """Test signature verification."""

    def test_valid_signature_accepted(self):
        signature = compute_shopify_hmac(BODY, SECRET)
        assert verify_shopify_hmac(BODY, signature, SECRET) is True

    def test_surrounding_whitespace_in_header_tolerated(self):
        signature = compute_shopify_hmac(BODY, SECRET)
        assert verify_shopify_hmac(BODY, f" {signature} ", SECRET) is True

    def test_flipped_body_byte_rejected(self):
        """Changing a single byte of the body invalidates the signature."""
        signature = compute_shopify_hmac(BODY, SECRET)
        tampered = bytearray(BODY)
        tampered[10] ^= 0x01
        assert verify_shopify_hmac(bytes(tampered), signature, SECRET) is False

    def test_flipped_signature_byte_rejected(self):
        signature = compute_shopify_hmac(BODY, SECRET)
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        assert verify_shopify_hmac(BODY, flipped, SECRET) is False

    def test_wrong_secret_rejected(self):
        signature = compute_shopify_hmac(BODY, "another-secret")
        assert verify_shopify_hmac(BODY, signature, SECRET) is False

    def test_missing_header_rejected(self):
        assert verify_shopify_hmac(BODY, None, SECRET) is False
        assert verify_shopify_hmac(BODY, "", SECRET) is False

    def test_unconfigured_secret_rejected(self):
        """An empty secret never verifies, even against an empty-key digest."""
        signature = compute_shopify_hmac(BODY, "")
        assert verify_shopify_hmac(BODY, signature, "") is False

    def test_hex_digest_rejected(self):
        """Shopify sends base64; a hex digest of the same HMAC does not verify."""
        hex_digest = hmac.new(SECRET.encode(), BODY, hashlib.sha256).hexdigest()
        assert verify_shopify_hmac(BODY, hex_digest, SECRET) is False
