"""
Request rate limiting.

Clients are keyed by their bearer token; anonymous callers share one bucket.
"""
from slowapi import Limiter
from starlette.requests import Request

from ward_admin.core import config


def get_authorization_header(request: Request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"


def permission_write_limit() -> str:
    return config.PERMISSION_WRITE_RATE_LIMIT


limiter = Limiter(key_func=get_authorization_header, enabled=config.RATE_LIMIT_ENABLED)
