"""
GitHub webhook signature validation utilities
"""

import binascii
import hashlib
import hmac
import structlog

from src.models.errors import MalformedSignatureError, MissingSignatureError

logger = structlog.get_logger()

SIGNATURE_PREFIX = "sha1="


def validate_github_webhook(payload: bytes, signature: str, secret: str) -> bool:
    """
    Validate GitHub webhook signature

    Args:
        payload: Raw request body as bytes
        signature: X-Hub-Signature header value ("sha1=<hex digest>")
        secret: Webhook secret configured in GitHub

    Returns:
        bool: True if signature is valid, False otherwise

    Raises:
        MissingSignatureError: the header is absent or empty
        MalformedSignatureError: the digest is not valid hex
    """
    if not signature:
        raise MissingSignatureError()

    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("Invalid signature format", signature=signature[:12])
        return False

    try:
        received_digest = bytes.fromhex(signature[len(SIGNATURE_PREFIX):])
    except ValueError as e:
        raise MalformedSignatureError(cause=e)

    expected_digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha1).digest()

    # Use constant-time comparison to prevent timing attacks
    is_valid = hmac.compare_digest(received_digest, expected_digest)

    if not is_valid:
        logger.warning(
            "Invalid webhook signature",
            expected_prefix=binascii.hexlify(expected_digest[:4]).decode(),
            received_prefix=binascii.hexlify(received_digest[:4]).decode(),
        )

    return is_valid


def extract_github_event_type(headers) -> str:
    """
    Extract GitHub event type from webhook headers

    Args:
        headers: Request headers mapping

    Returns:
        str: Event type (e.g., 'issue_comment', 'pull_request')
    """
    return headers.get("X-GitHub-Event", "")
