"""Session token extraction for API protection."""

from fastapi import Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# HTTP Bearer scheme for Authorization header
_security = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Security(_security),
) -> str | None:
    """
    FastAPI dependency returning the session token, or None for anonymous calls.

    Anonymous callers are allowed through; operations decide for themselves
    what an empty session may do.
    """
    if credentials is None:
        return None
    return credentials.credentials


def token_from_request(request: Request) -> str | None:
    """Session token from a raw request's Authorization header."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split("Bearer ", 1)[1].strip() or None
    return None
