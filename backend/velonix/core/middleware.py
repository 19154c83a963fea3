"""
VELONIX - HTTP Middleware

RequestLoggingMiddleware   one log line per request, X-Request-ID / X-Response-Time
SecurityHeadersMiddleware  static hardening headers
RequestSizeLimitMiddleware rejects oversized bodies before they are parsed
"""

import time
from typing import Callable, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from velonix.core.logging_config import logger, set_request_id, set_admin_id, generate_request_id

QUIET_PATHS = ("/health", "/favicon.ico", "/docs", "/redoc", "/openapi.json")
# Screenshots are fetched often from the dashboard
QUIET_PREFIXES = ("/uploads/",)

SLOW_REQUEST_MS = 1000

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-Frame-Options": "DENY",
}


def is_quiet_path(path: str) -> bool:
    return path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with an id (taken from X-Request-ID when the client
    sends one) and log its outcome. The id and the admin id set during
    authorization are cleared once the response is produced.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        path = request.url.path
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.log_error_with_context(
                exc,
                context=f"{request.method} {path}",
                duration_ms=(time.perf_counter() - started) * 1000,
            )
            raise
        else:
            duration_ms = (time.perf_counter() - started) * 1000
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

            if not is_quiet_path(path):
                logger.log_request(
                    request.method,
                    path,
                    response.status_code,
                    duration_ms,
                    client_ip=request.client.host if request.client else "unknown",
                )
                if duration_ms > SLOW_REQUEST_MS:
                    logger.warning(f"Slow request: {request.method} {path} took {duration_ms:.0f}ms")
            return response
        finally:
            set_request_id("")
            set_admin_id("")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared Content-Length exceeds max_size"""

    def __init__(self, app: ASGIApp, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_size:
            logger.warning(
                f"Rejected {request.method} {request.url.path}: body of {declared} bytes exceeds {self.max_size}"
            )
            return JSONResponse(
                status_code=413,
                content={
                    "error": f"Request body too large. Maximum size is {self.max_size // (1024 * 1024)}MB",
                    "code": "REQUEST_TOO_LARGE",
                },
            )
        return await call_next(request)
