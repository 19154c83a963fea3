"""
FastAPI dependencies.

Long-lived collaborators (email service, notification dispatcher, upload
storage) are built once in `velonix.main` and kept on `app.state`; services
that need a database session are built per request around it.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from velonix.core.database import get_db
from velonix.core.exceptions import UnauthorizedError
from velonix.schemas.auth import AdminIdentity
from velonix.services.admin_auth_service import AdminAuthService
from velonix.services.email_service import EmailService
from velonix.services.notification_dispatcher import NotificationDispatcher
from velonix.services.registration_service import RegistrationService
from velonix.services.review_service import ReviewService
from velonix.services.upload_storage import UploadStorage

# auto_error=False so a missing header becomes our 401 instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.notification_dispatcher


def get_upload_storage(request: Request) -> UploadStorage:
    return request.app.state.upload_storage


def get_registration_service(
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    email_service: EmailService = Depends(get_email_service),
) -> RegistrationService:
    return RegistrationService(db, storage, dispatcher, email_service)


def get_review_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_admin_auth_service(db: AsyncSession = Depends(get_db)) -> AdminAuthService:
    return AdminAuthService(db)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AdminAuthService = Depends(get_admin_auth_service),
) -> AdminIdentity:
    """Require a valid admin bearer token"""
    if credentials is None:
        raise UnauthorizedError()
    return await auth_service.authorize(credentials.credentials)
