from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from velonix.core.config import settings, DEFAULT_JWT_SECRET
from velonix.core.database import close_db, get_session_local, init_db
from velonix.core.exceptions import AuthenticationError, VelonixError, error_response
from velonix.core.logging_config import logger
from velonix.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from velonix.core.rate_limiter import limiter, rate_limit_exceeded_handler
from velonix.api.router import api_router
from velonix.services.admin_auth_service import AdminAuthService
from velonix.services.email_service import EmailService
from velonix.services.notification_dispatcher import NotificationDispatcher
from velonix.services.upload_storage import UPLOAD_URL_PREFIX, UploadStorage


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
        if settings.is_production:
            errors.append("JWT_SECRET_KEY is not set or using default value")
        else:
            warnings.append("JWT_SECRET_KEY is using the default value - admin tokens are forgeable")

    if not settings.ADMIN_PASSWORD:
        if settings.is_production:
            errors.append("ADMIN_PASSWORD is not set")
        else:
            warnings.append("ADMIN_PASSWORD not set - a new admin will get the development default password")

    if not (settings.SMTP_USER and settings.SMTP_PASSWORD):
        warnings.append("SMTP_USER/SMTP_PASSWORD not set - confirmation emails disabled")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] ✓ Critical configuration validated")
    return True


async def ensure_database_ready():
    """Create tables and seed the admin credential"""
    await init_db()

    session_factory = get_session_local()
    async with session_factory() as session:
        created = await AdminAuthService(session).ensure_seeded()

    logger.info(f"[Startup] Database ready (admin seeded: {created})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME} registration backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info("=" * 60)

    await validate_critical_config()
    await ensure_database_ready()
    await app.state.notification_dispatcher.start()

    yield

    logger.info("Shutting down...")
    await app.state.notification_dispatcher.stop()
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Symposium registration, ticketing and admin review API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False,
)

# Process-lifetime collaborators, reached through velonix.api.dependencies
app.state.email_service = EmailService(settings)
app.state.notification_dispatcher = NotificationDispatcher(maxsize=settings.NOTIFICATION_QUEUE_SIZE)
app.state.upload_storage = UploadStorage(settings.UPLOAD_DIR, settings.MAX_UPLOAD_SIZE)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
# Multipart bodies carry the screenshot plus form fields
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_UPLOAD_SIZE + 1024 * 1024)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


@app.exception_handler(VelonixError)
async def velonix_exception_handler(request: Request, exc: VelonixError):
    if exc.http_status >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.http_status, content=error_response(exc), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields[".".join(loc) or "body"] = error.get("msg", "Invalid value")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "code": "VALIDATION_ERROR", "details": {"fields": fields}},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
    }


app.include_router(api_router, prefix="/api")
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(settings.UPLOAD_DIR)), name="uploads")


def main():
    import uvicorn
    uvicorn.run(
        "velonix.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
