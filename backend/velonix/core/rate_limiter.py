"""
Rate Limiting for the public endpoints
======================================
Implements rate limiting using slowapi with in-process storage.

- /api/admin/login: LOGIN_RATE_LIMIT (brute force protection)
- /api/register: REGISTER_RATE_LIMIT
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from velonix.core.config import settings
from velonix.core.logging_config import logger


limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
    headers_enabled=False,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return a JSON 429 in the same shape as other API errors"""
    logger.warning(
        f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}",
        extra={
            "event_type": "rate_limit_exceeded",
            "http_path": request.url.path,
            "limit": str(exc.detail),
        }
    )
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests. Please try again later.", "code": "RATE_LIMITED"},
    )
