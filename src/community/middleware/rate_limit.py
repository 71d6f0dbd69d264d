"""Rate limiting middleware using slowapi."""

import hashlib

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from community.auth import token_from_request


def get_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key from request.

    Uses the session token if present, otherwise falls back to IP address.
    """
    token = token_from_request(request)
    if token:
        # Keep raw tokens out of limiter storage
        return "session:" + hashlib.sha256(token.encode()).hexdigest()[:32]
    return get_remote_address(request)


# Create limiter instance
limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=["300/minute"],  # Global limit: 5 req/sec
    storage_uri="memory://",  # In-memory storage (suitable for single instance)
)


# Export limiter
__all__ = ["limiter"]
