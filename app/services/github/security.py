import hashlib
import hmac


def compute_signature(payload_body: bytes, secret_token: str) -> str:
    """Return the X-Hub-Signature-256 value GitHub sends for *payload_body*."""
    digest = hmac.new(
        secret_token.encode("utf-8"), msg=payload_body, digestmod=hashlib.sha256
    ).hexdigest()
    return f"sha256={digest}"


def verify_signature(
    payload_body: bytes, secret_token: str, signature_header: str
) -> bool:
    """
    Verify that the payload was sent from GitHub by validating the SHA256 signature.

    Deliveries are rejected when either the header or the configured secret is
    missing.

    Args:
        payload_body: raw request body bytes
        secret_token: the webhook secret
        signature_header: the X-Hub-Signature-256 header value
    """
    if not signature_header or not secret_token:
        return False

    expected = compute_signature(payload_body, secret_token)
    return hmac.compare_digest(expected, signature_header)
