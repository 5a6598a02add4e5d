"""
Slack request signature verification.
"""

import hashlib
import hmac
import math
import time
from typing import Optional

SIGNATURE_VERSION = "v0"
DEFAULT_MAX_AGE_SECONDS = 300


def compute_slack_signature(body: bytes, timestamp: str, signing_secret: str) -> str:
    """
    Compute the ``v0=`` signature Slack sends in ``X-Slack-Signature``.

    Args:
        body: Raw request body
        timestamp: Value of ``X-Slack-Request-Timestamp``
        signing_secret: App signing secret

    Returns:
        Signature string, e.g. ``v0=a2114d57...``
    """
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(signing_secret.encode(), base, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    body: bytes,
    signature: Optional[str],
    timestamp: Optional[str],
    signing_secret: str,
    *,
    now: Optional[float] = None,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
) -> bool:
    """
    Verify a Slack webhook signature and its freshness.

    Args:
        body: Raw request body
        signature: Signature from request header
        timestamp: Request timestamp header, in Unix seconds
        signing_secret: App signing secret
        now: Current Unix time, defaults to ``time.time()``
        max_age_seconds: Allowed clock difference in either direction

    Returns:
        True if signature is valid, False otherwise
    """
    if not signature or not timestamp or not signing_secret:
        return False

    try:
        sent_at = float(timestamp)
    except ValueError:
        return False
    if not math.isfinite(sent_at):
        return False

    current = time.time() if now is None else now
    if abs(current - sent_at) > max_age_seconds:
        return False

    try:
        expected = compute_slack_signature(body, timestamp, signing_secret).encode("ascii")
        claimed = signature.encode("ascii")
    except UnicodeEncodeError:
        return False

    if len(expected) != len(claimed):
        return False

    # Constant-time comparison
    return hmac.compare_digest(expected, claimed)
