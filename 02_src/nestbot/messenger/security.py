"""Webhook signature and subscription checks."""

import hashlib
import hmac

from ..errors import SignatureError

SUPPORTED_METHODS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


def verify_signature(body: bytes, signature: str, app_secret: str) -> None:
    """Check a ``<method>=<hexdigest>`` HMAC of the raw body.

    Raises:
        SignatureError: malformed header, unsupported method or mismatch.
    """
    method, sep, received = signature.partition("=")
    if not sep or not received:
        raise SignatureError("Malformed signature header")

    digestmod = SUPPORTED_METHODS.get(method.lower())
    if digestmod is None:
        raise SignatureError(f"Unsupported signature method: {method}")

    expected = hmac.new(app_secret.encode("utf-8"), body, digestmod).hexdigest()
    # Header values may carry non-ASCII bytes; compare encoded forms.
    if not hmac.compare_digest(received.lower().encode("utf-8"), expected.encode("ascii")):
        raise SignatureError("Couldn't validate the request signature")


def sign(body: bytes, app_secret: str, method: str = "sha1") -> str:
    """Build the signature header value the platform would send."""
    digest = hmac.new(app_secret.encode("utf-8"), body, SUPPORTED_METHODS[method]).hexdigest()
    return f"{method}={digest}"


def verify_challenge(
    mode: str | None,
    verify_token: str | None,
    challenge: str | None,
    expected_token: str,
) -> str | None:
    """Return the challenge to echo back, or None if the subscription is refused."""
    if mode != "subscribe" or challenge is None:
        return None
    if verify_token is None or not hmac.compare_digest(
        verify_token.encode("utf-8"), expected_token.encode("utf-8")
    ):
        return None
    return challenge
