from fastapi import APIRouter, Depends, Request

from velonix.api.dependencies import get_admin_auth_service
from velonix.core.config import settings
from velonix.core.rate_limiter import limiter
from velonix.schemas.auth import AdminLogin, Token
from velonix.services.admin_auth_service import AdminAuthService

router = APIRouter()


@router.post("/admin/login", response_model=Token)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def admin_login(
    request: Request,
    credentials: AdminLogin,
    auth_service: AdminAuthService = Depends(get_admin_auth_service),
):
    """Exchange the admin username/password for a bearer token"""
    client_ip = request.client.host if request.client else "unknown"
    token = await auth_service.login(credentials.username, credentials.password, client_ip=client_ip)
    return Token(token=token)
