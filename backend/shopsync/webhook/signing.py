"""
Shopify webhook signature verification.

Shopify signs each delivery with HMAC-SHA256 over the raw request body using
the app's shared secret and sends the base64 digest in X-Shopify-Hmac-Sha256.
The digest must be computed over the exact bytes received: parsing and
re-serialising the JSON changes the byte layout and breaks the comparison.
"""

import base64
import hashlib
import hmac
from typing import Optional


def compute_shopify_hmac(raw_body: bytes, secret: str) -> str:
    """
    Compute the base64-encoded HMAC-SHA256 digest of a request body.

    Args:
        raw_body: The unparsed request body
        secret: The shared webhook secret

    Returns:
        Base64 digest as sent by Shopify
    """
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_shopify_hmac(raw_body: bytes, hmac_header: Optional[str], secret: str) -> bool:
    """
    Verify a Shopify webhook signature.

    Fails closed: a missing header or an unconfigured secret is a failure,
    never a reason to skip verification.

    Args:
        raw_body: The unparsed request body
        hmac_header: Value of the X-Shopify-Hmac-Sha256 header
        secret: The shared webhook secret

    Returns:
        True if the signature is valid, False otherwise
    """
    if not hmac_header or not secret:
        return False

    expected = compute_shopify_hmac(raw_body, secret)
    return hmac.compare_digest(expected.encode("ascii"), hmac_header.strip().encode("utf-8"))
